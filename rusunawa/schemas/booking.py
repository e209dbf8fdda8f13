"""
Booking schemas.

`Booking` mirrors a reservation as returned by the backend;
`BookingCreate` is the payload of the booking-creation endpoint.
"""

from __future__ import annotations

from datetime import date as Date
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, Field, field_serializer, field_validator, model_validator

from rusunawa.schemas.common.base import BaseSchema, coerce_calendar_date
from rusunawa.schemas.common.enums import BookingStatus

__all__ = [
    "Booking",
    "BookingCreate",
]


class Booking(BaseSchema):
    """A reservation held by a tenant."""

    booking_id: int = Field(..., validation_alias=AliasChoices("bookingId", "booking_id", "id"))
    tenant_id: int
    room_id: int
    room_name: Optional[str] = None
    check_in_date: Date = Field(
        ..., validation_alias=AliasChoices("checkInDate", "check_in_date", "checkIn", "startDate")
    )
    check_out_date: Date = Field(
        ..., validation_alias=AliasChoices("checkOutDate", "check_out_date", "checkOut", "endDate")
    )
    status: BookingStatus
    total_amount: Decimal = Field(Decimal("0.00"), ge=0)
    rental_type_id: Optional[int] = None

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def coerce_dates(cls, v):
        return coerce_calendar_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def validate_date_order(self) -> "Booking":
        if self.check_in_date >= self.check_out_date:
            raise ValueError(
                f"Check-in date ({self.check_in_date}) must be before "
                f"check-out date ({self.check_out_date})"
            )
        return self

    @property
    def is_active(self) -> bool:
        return self.status.is_active


class BookingCreate(BaseSchema):
    """Payload for `POST /v1/bookings`."""

    tenant_id: int = Field(..., ge=1)
    room_id: int = Field(..., ge=1)
    check_in_date: Date
    check_out_date: Date
    rental_type_id: int = Field(..., ge=1)
    total_amount: Decimal = Field(..., gt=0)

    @field_validator("total_amount")
    @classmethod
    def quantize_amount(cls, v: Decimal) -> Decimal:
        return v.quantize(Decimal("0.01"))

    @field_serializer("total_amount")
    def serialize_amount(self, v: Decimal) -> float:
        return float(v)

    @model_validator(mode="after")
    def validate_date_order(self) -> "BookingCreate":
        if self.check_in_date >= self.check_out_date:
            raise ValueError("Check-in date must be before check-out date")
        return self
