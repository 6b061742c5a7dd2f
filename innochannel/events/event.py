"""Webhook event record."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

import pydantic

from innochannel.exceptions import ValidationError
from innochannel.models import ApiModel, Property, RatePlan, Reservation, Room

# Events the API can deliver to a webhook
KNOWN_EVENTS = (
    "reservation.created",
    "reservation.updated",
    "reservation.cancelled",
    "reservation.confirmed",
    "inventory.updated",
    "rates.updated",
    "property.updated",
    "room.updated",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Event:
    """A single event received from the channel manager.

    Attributes:
        name: Dotted event name, e.g. ``reservation.created``
        data: Event payload as sent by the API
        object_type: Kind of object the event concerns
        received_at: When the event was received
        source: ``webhook`` for verified deliveries, ``application`` for
            events emitted by the host
    """

    name: str
    data: Dict[str, Any] = field(default_factory=dict)
    object_type: Optional[str] = None
    received_at: datetime = field(default_factory=_utcnow)
    source: str = "application"

    def __post_init__(self):
        if not self.name:
            raise ValueError("Event name cannot be empty")
        if self.object_type is None:
            object.__setattr__(self, "object_type", self.domain)

    @property
    def domain(self) -> str:
        """Prefix of the event name (``reservation`` for ``reservation.created``)."""
        return self.name.split(".", 1)[0]

    @property
    def action(self) -> str:
        return self.name.split(".", 1)[1] if "." in self.name else ""

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def as_reservation(self) -> Reservation:
        return self._as_model(Reservation)

    def as_property(self) -> Property:
        return self._as_model(Property)

    def as_room(self) -> Room:
        return self._as_model(Room)

    def as_rate_plan(self) -> RatePlan:
        return self._as_model(RatePlan)

    def _as_model(self, model: Type[ApiModel]):
        try:
            return model.model_validate(self.data)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Event '{self.name}' does not carry a valid {model.__name__}",
                errors={
                    ".".join(str(p) for p in err["loc"]) or "__root__": [err["msg"]]
                    for err in e.errors()
                },
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "object_type": self.object_type,
            "data": self.data,
            "received_at": self.received_at.isoformat(),
            "source": self.source,
        }
