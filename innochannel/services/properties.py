"""Property, room and rate plan management."""

import re
from typing import Any, Dict, List, Optional

from innochannel.models import Property, RatePlan, Room, ResourceId
from innochannel.services.base import BaseService, FieldErrors, is_int

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


class PropertyService(BaseService):
    """Service for ``/api/pms/properties`` and its rooms and rate plans."""

    base_path = "/api/pms/properties"

    def _path(self, property_id: ResourceId, *parts: Any) -> str:
        return "/".join([self.base_path, str(property_id), *(str(part) for part in parts)])

    # Properties

    def create(self, property_data: Dict[str, Any]) -> Property:
        self._validate_property(property_data, is_create=True)
        return self._hydrate(Property, self.client.post(self.base_path, property_data))

    def get(self, property_id: ResourceId) -> Property:
        return self._hydrate(Property, self.client.get(self._path(property_id)))

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Property]:
        return self._hydrate_list(Property, self.client.get(self.base_path, filters))

    def update(self, property_id: ResourceId, property_data: Dict[str, Any]) -> Property:
        self._validate_property(property_data, is_create=False)
        return self._hydrate(Property, self.client.put(self._path(property_id), property_data))

    def delete(self, property_id: ResourceId) -> bool:
        self.client.delete(self._path(property_id))
        return True

    # Rooms

    def create_room(self, property_id: ResourceId, room_data: Dict[str, Any]) -> Room:
        self._validate_room(room_data, is_create=True)
        response = self.client.post(self._path(property_id, "rooms"), room_data)
        return self._hydrate(Room, response)

    def list_rooms(
        self, property_id: ResourceId, filters: Optional[Dict[str, Any]] = None
    ) -> List[Room]:
        return self._hydrate_list(Room, self.client.get(self._path(property_id, "rooms"), filters))

    def get_room(self, property_id: ResourceId, room_id: ResourceId) -> Room:
        return self._hydrate(Room, self.client.get(self._path(property_id, "rooms", room_id)))

    def update_room(
        self, property_id: ResourceId, room_id: ResourceId, room_data: Dict[str, Any]
    ) -> Room:
        self._validate_room(room_data, is_create=False)
        response = self.client.put(self._path(property_id, "rooms", room_id), room_data)
        return self._hydrate(Room, response)

    def delete_room(self, property_id: ResourceId, room_id: ResourceId) -> bool:
        self.client.delete(self._path(property_id, "rooms", room_id))
        return True

    # Rate plans

    def create_rate_plan(self, property_id: ResourceId, rate_plan_data: Dict[str, Any]) -> RatePlan:
        self._validate_rate_plan(rate_plan_data)
        response = self.client.post(self._path(property_id, "rate-plans"), rate_plan_data)
        return self._hydrate(RatePlan, response)

    def list_rate_plans(
        self, property_id: ResourceId, filters: Optional[Dict[str, Any]] = None
    ) -> List[RatePlan]:
        response = self.client.get(self._path(property_id, "rate-plans"), filters)
        return self._hydrate_list(RatePlan, response)

    def get_rate_plan(self, property_id: ResourceId, rate_plan_id: ResourceId) -> RatePlan:
        response = self.client.get(self._path(property_id, "rate-plans", rate_plan_id))
        return self._hydrate(RatePlan, response)

    def update_rate_plan(
        self, property_id: ResourceId, rate_plan_id: ResourceId, rate_plan_data: Dict[str, Any]
    ) -> RatePlan:
        self._validate_rate_plan(rate_plan_data)
        response = self.client.put(
            self._path(property_id, "rate-plans", rate_plan_id), rate_plan_data
        )
        return self._hydrate(RatePlan, response)

    def delete_rate_plan(self, property_id: ResourceId, rate_plan_id: ResourceId) -> bool:
        self.client.delete(self._path(property_id, "rate-plans", rate_plan_id))
        return True

    # PMS

    def test_pms_connection(self, connection_data: Dict[str, Any]) -> Any:
        return self.client.post("/api/pms/test-connection", connection_data)

    def sync_with_pms(
        self, property_id: ResourceId, sync_options: Optional[Dict[str, Any]] = None
    ) -> Any:
        return self.client.post(self._path(property_id, "sync"), sync_options)

    # Validation

    def _validate_property(self, data: Dict[str, Any], is_create: bool) -> None:
        errors: FieldErrors = {}

        if is_create and not data.get("property_name"):
            errors["property_name"] = ["Property name is required"]
        elif "property_name" in data and len(str(data["property_name"])) < 2:
            errors["property_name"] = ["Property name must be at least 2 characters"]

        if data.get("email") is not None and not EMAIL_PATTERN.match(str(data["email"])):
            errors["email"] = ["Invalid email format"]

        self._raise_if_errors("Property validation failed", errors)

    def _validate_room(self, data: Dict[str, Any], is_create: bool) -> None:
        errors: FieldErrors = {}

        if is_create:
            if not data.get("name"):
                errors["name"] = ["Room name is required"]
            if not data.get("room_type"):
                errors["room_type"] = ["Room type is required"]

        if "max_occupancy" in data:
            if not is_int(data["max_occupancy"]) or data["max_occupancy"] < 1:
                errors["max_occupancy"] = ["Max occupancy must be a positive integer"]

        self._raise_if_errors("Room validation failed", errors)

    def _validate_rate_plan(self, data: Dict[str, Any]) -> None:
        errors: FieldErrors = {}

        if not data.get("name"):
            errors["name"] = ["Rate plan name is required"]

        if not data.get("currency"):
            errors["currency"] = ["Currency is required"]
        elif not CURRENCY_PATTERN.match(str(data["currency"])):
            errors["currency"] = ["Currency must be a valid 3-letter ISO code"]

        self._raise_if_errors("Rate plan validation failed", errors)
