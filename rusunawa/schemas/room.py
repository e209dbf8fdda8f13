"""
Room, rental type and availability schemas.
"""

from __future__ import annotations

from datetime import date as Date
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from rusunawa.schemas.common.base import BaseSchema, FrozenSchema, coerce_calendar_date
from rusunawa.schemas.common.enums import RentalTypeName

__all__ = [
    "RentalType",
    "Room",
    "RoomAvailabilityDay",
]


class RentalType(FrozenSchema):
    """
    Rental type entity.

    `harian` bills per day with the duration taken from the date range;
    `bulanan` bills per calendar month with an explicitly chosen month count.
    """

    rental_type_id: int = Field(..., ge=1)
    name: RentalTypeName

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def is_daily(self) -> bool:
        return self.name is RentalTypeName.HARIAN

    @property
    def is_monthly(self) -> bool:
        return self.name is RentalTypeName.BULANAN

    @property
    def unit_label(self) -> str:
        return "day" if self.is_daily else "month"


class Room(BaseSchema):
    """Room fields relevant to pricing."""

    room_id: int = Field(..., ge=1)
    name: Optional[str] = None
    rate: Decimal = Field(..., gt=0, description="Price per rental unit (day or month)")
    rental_type: Optional[RentalType] = None
    capacity: Optional[int] = Field(None, ge=0)

    @field_validator("rate")
    @classmethod
    def quantize_rate(cls, v: Decimal) -> Decimal:
        return v.quantize(Decimal("0.01"))


class RoomAvailabilityDay(BaseSchema):
    """One row of `GET /v1/rooms/{id}/availability`."""

    date: Date
    is_available: bool = True

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return coerce_calendar_date(v)
