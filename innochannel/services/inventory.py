"""Availability, rate and restriction management."""

from typing import Any, Dict, Optional

from innochannel.exceptions import ValidationError
from innochannel.models import ResourceId
from innochannel.services.base import BaseService, FieldErrors, is_int, is_number, parse_date

UPDATE_TYPES = ("availability", "rate")


class InventoryService(BaseService):
    """Service for the inventory endpoints of a property."""

    def _path(self, property_id: ResourceId, endpoint: str) -> str:
        return f"/api/pms/properties/{property_id}/{endpoint}"

    def update_availability(self, property_id: ResourceId, availability_data: Dict[str, Any]) -> Any:
        self._raise_if_errors(
            "Availability validation failed", self._availability_errors(availability_data)
        )
        return self.client.post(self._path(property_id, "availability"), availability_data)

    def get_availability(
        self, property_id: ResourceId, filters: Optional[Dict[str, Any]] = None
    ) -> Any:
        return self.client.get(self._path(property_id, "availability"), filters)

    def update_rates(self, property_id: ResourceId, rate_data: Dict[str, Any]) -> Any:
        self._raise_if_errors("Rate validation failed", self._rate_errors(rate_data))
        return self.client.post(self._path(property_id, "rates"), rate_data)

    def get_rates(self, property_id: ResourceId, filters: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(self._path(property_id, "rates"), filters)

    def update_batch(self, property_id: ResourceId, batch_data: Dict[str, Any]) -> Any:
        """Apply several availability and rate updates in one call.

        Errors of individual updates are reported as ``updates.<index>.<field>``.
        """
        self._validate_batch(batch_data)
        return self.client.post(self._path(property_id, "inventory/batch"), batch_data)

    def get_calendar(
        self,
        property_id: ResourceId,
        date_from: str,
        date_to: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Any:
        params = {**(filters or {}), "date_from": date_from, "date_to": date_to}
        return self.client.get(self._path(property_id, "calendar"), params)

    def set_restrictions(self, property_id: ResourceId, restriction_data: Dict[str, Any]) -> Any:
        self._raise_if_errors(
            "Restriction validation failed", self._restriction_errors(restriction_data)
        )
        return self.client.post(self._path(property_id, "restrictions"), restriction_data)

    def get_restrictions(
        self, property_id: ResourceId, filters: Optional[Dict[str, Any]] = None
    ) -> Any:
        return self.client.get(self._path(property_id, "restrictions"), filters)

    def sync_with_pms(
        self, property_id: ResourceId, sync_options: Optional[Dict[str, Any]] = None
    ) -> Any:
        return self.client.post(self._path(property_id, "sync"), sync_options)

    # Validation

    @staticmethod
    def _required(data: Dict[str, Any], fields: Dict[str, str]) -> FieldErrors:
        return {field: [message] for field, message in fields.items() if not data.get(field)}

    @staticmethod
    def _date_range_errors(data: Dict[str, Any]) -> FieldErrors:
        if not (data.get("date_from") and data.get("date_to")):
            return {}
        date_from = parse_date(data["date_from"])
        date_to = parse_date(data["date_to"])
        if date_from is None:
            return {"date_from": ["Start date is invalid"]}
        if date_to is None:
            return {"date_to": ["End date is invalid"]}
        if date_from >= date_to:
            return {"date_to": ["End date must be after start date"]}
        return {}

    def _availability_errors(self, data: Dict[str, Any]) -> FieldErrors:
        errors = self._required(
            data,
            {
                "room_id": "Room ID is required",
                "date_from": "Start date is required",
                "date_to": "End date is required",
            },
        )
        if "availability" in data and (
            not is_int(data["availability"]) or data["availability"] < 0
        ):
            errors["availability"] = ["Availability must be a non-negative integer"]
        errors.update(self._date_range_errors(data))
        return errors

    def _rate_errors(self, data: Dict[str, Any]) -> FieldErrors:
        errors = self._required(
            data,
            {
                "room_id": "Room ID is required",
                "rate_plan_id": "Rate plan ID is required",
                "date_from": "Start date is required",
                "date_to": "End date is required",
            },
        )
        if "rate" in data and (not is_number(data["rate"]) or data["rate"] < 0):
            errors["rate"] = ["Rate must be a non-negative number"]
        errors.update(self._date_range_errors(data))
        return errors

    def _restriction_errors(self, data: Dict[str, Any]) -> FieldErrors:
        errors = self._required(
            data,
            {
                "room_id": "Room ID is required",
                "date_from": "Start date is required",
                "date_to": "End date is required",
            },
        )
        min_stay = data.get("min_stay")
        max_stay = data.get("max_stay")
        if "min_stay" in data and (not is_int(min_stay) or min_stay < 1):
            errors["min_stay"] = ["Minimum stay must be a positive integer"]
        if "max_stay" in data and (not is_int(max_stay) or max_stay < 1):
            errors["max_stay"] = ["Maximum stay must be a positive integer"]
        if is_int(min_stay) and is_int(max_stay) and min_stay > max_stay:
            errors["max_stay"] = ["Maximum stay must be greater than or equal to minimum stay"]
        errors.update(self._date_range_errors(data))
        return errors

    def _validate_batch(self, data: Dict[str, Any]) -> None:
        updates = data.get("updates")
        if not updates or not isinstance(updates, list):
            raise ValidationError(
                "Batch validation failed", errors={"updates": ["Updates array is required"]}
            )

        errors: FieldErrors = {}
        for index, update in enumerate(updates):
            update_type = update.get("type") if isinstance(update, dict) else None
            if update_type not in UPDATE_TYPES:
                errors[f"updates.{index}.type"] = ['Update type must be "availability" or "rate"']
                continue

            if update_type == "availability":
                item_errors = self._availability_errors(update)
            else:
                item_errors = self._rate_errors(update)
            for field, field_errors in item_errors.items():
                errors[f"updates.{index}.{field}"] = field_errors

        self._raise_if_errors("Batch validation failed", errors)
