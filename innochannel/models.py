"""Data models for Innochannel API resources."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

ResourceId = Union[int, str]


class ReservationStatus(str, Enum):
    """Status of a reservation."""

    NEW = "new"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    MODIFIED = "modified"
    CANCELLED = "cancelled"


class ApiModel(BaseModel):
    """Base model for API resources.

    Unknown fields returned by the API are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class Property(ApiModel):
    """Hotel property registered in the channel manager."""

    id: Optional[ResourceId] = None
    name: str = Field(..., min_length=2, alias="property_name")
    description: Optional[str] = None
    pms_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    policies: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Room(ApiModel):
    """Room type of a property."""

    id: Optional[ResourceId] = None
    property_id: Optional[ResourceId] = None
    name: str
    room_type: str
    description: Optional[str] = None
    max_occupancy: int = Field(1, ge=1)
    max_adults: int = Field(1, ge=1)
    max_children: int = Field(0, ge=0)
    size: Optional[float] = Field(None, ge=0)
    size_unit: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    bed_types: List[str] = Field(default_factory=list)
    view_type: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RatePlan(ApiModel):
    """Rate plan of a property."""

    id: Optional[ResourceId] = None
    property_id: Optional[ResourceId] = None
    name: str
    description: Optional[str] = None
    currency: str = Field(..., pattern=r"^[A-Z]{3}$")
    rate_type: Optional[str] = None
    restrictions: Dict[str, Any] = Field(default_factory=dict)
    cancellation_policy: Dict[str, Any] = Field(default_factory=dict)
    is_refundable: bool = True
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Reservation(ApiModel):
    """Reservation received from an OTA channel."""

    id: Optional[ResourceId] = None
    property_id: Optional[ResourceId] = None
    ota_name: Optional[str] = None
    ota_reservation_id: Optional[str] = None
    ota_confirmation_code: Optional[str] = None
    # Statuses the SDK does not know are kept as plain strings
    status: Union[ReservationStatus, str] = Field(
        ReservationStatus.NEW, union_mode="left_to_right"
    )
    payment_status: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_country: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    room_name: Optional[str] = None
    room_quantity: int = Field(1, ge=1)
    total_amount: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    special_requests: Optional[List[str]] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_stay_dates(self) -> "Reservation":
        if self.check_in_date and self.check_out_date:
            if self.check_in_date >= self.check_out_date:
                raise ValueError("check_in_date must be before check_out_date")
        return self

    @property
    def nights(self) -> int:
        if not (self.check_in_date and self.check_out_date):
            return 0
        return (self.check_out_date - self.check_in_date).days

    @property
    def total_guests(self) -> int:
        return self.adults + self.children + self.infants

    @property
    def is_cancelled(self) -> bool:
        return self.status == ReservationStatus.CANCELLED

    @property
    def is_pending(self) -> bool:
        return self.status == ReservationStatus.PENDING
