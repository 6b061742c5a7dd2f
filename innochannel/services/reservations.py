"""Reservation management."""

from typing import Any, Dict, List, Optional

from innochannel.models import Reservation
from innochannel.services.base import BaseService, FieldErrors, is_int, parse_date


class ReservationService(BaseService):
    """Service for ``/api/bookings``."""

    base_path = "/api/bookings"

    def create(self, reservation_data: Dict[str, Any]) -> Reservation:
        self._validate_stay(reservation_data)
        return self._hydrate(Reservation, self.client.post(self.base_path, reservation_data))

    def get(self, reservation_id: str) -> Reservation:
        return self._hydrate(Reservation, self.client.get(f"{self.base_path}/{reservation_id}"))

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Reservation]:
        return self._hydrate_list(Reservation, self.client.get(self.base_path, filters))

    def update(self, reservation_id: str, update_data: Dict[str, Any]) -> Reservation:
        self._validate_stay(update_data)
        response = self.client.put(f"{self.base_path}/{reservation_id}", update_data)
        return self._hydrate(Reservation, response)

    def cancel(
        self, reservation_id: str, cancellation_data: Optional[Dict[str, Any]] = None
    ) -> bool:
        self.client.post(f"{self.base_path}/{reservation_id}/cancel", cancellation_data)
        self.logger.info("reservation_cancelled", reservation_id=reservation_id)
        return True

    def confirm(
        self, reservation_id: str, confirmation_data: Optional[Dict[str, Any]] = None
    ) -> Reservation:
        response = self.client.post(f"{self.base_path}/{reservation_id}/confirm", confirmation_data)
        return self._hydrate(Reservation, response)

    def modify(self, reservation_id: str, modification_data: Dict[str, Any]) -> Reservation:
        self._validate_stay(modification_data)
        response = self.client.post(f"{self.base_path}/{reservation_id}/modify", modification_data)
        return self._hydrate(Reservation, response)

    def get_history(self, reservation_id: str) -> List[Dict[str, Any]]:
        history = self._unwrap(self.client.get(f"{self.base_path}/{reservation_id}/history"))
        return history if isinstance(history, list) else []

    def sync_with_pms(
        self, reservation_id: str, sync_options: Optional[Dict[str, Any]] = None
    ) -> Any:
        return self.client.post(f"{self.base_path}/{reservation_id}/sync-pms", sync_options)

    def _validate_stay(self, data: Dict[str, Any]) -> None:
        """Check guest counts and stay dates present in ``data``."""
        errors: FieldErrors = {}

        if "adults" in data and (not is_int(data["adults"]) or data["adults"] < 1):
            errors["adults"] = ["At least one adult is required"]
        for field in ("children", "infants"):
            if field in data and (not is_int(data[field]) or data[field] < 0):
                errors[field] = [f"{field.capitalize()} must be zero or more"]

        check_in = parse_date(data["check_in_date"]) if "check_in_date" in data else None
        check_out = parse_date(data["check_out_date"]) if "check_out_date" in data else None
        if "check_in_date" in data and check_in is None:
            errors["check_in_date"] = ["Check-in date is invalid"]
        if "check_out_date" in data and check_out is None:
            errors["check_out_date"] = ["Check-out date is invalid"]
        if check_in and check_out and check_in >= check_out:
            errors["check_out_date"] = ["Check-out date must be after check-in date"]

        self._raise_if_errors("Reservation validation failed", errors)
