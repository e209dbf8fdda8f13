"""
Reservation request and quote schemas.

Dates in a `ReservationRequest` stay raw (string or date) so that a
malformed value is reported as an invalid date range by the engine
instead of failing schema validation.
"""

from __future__ import annotations

from datetime import date as Date
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import Field, model_validator

from rusunawa.config.settings import settings
from rusunawa.schemas.booking import Booking
from rusunawa.schemas.common.base import FrozenSchema
from rusunawa.schemas.room import RentalType, Room
from rusunawa.utils.date_utils import days_between, iter_days

__all__ = [
    "DateRange",
    "ReservationRequest",
    "ReservationError",
    "ReservationQuote",
]


class DateRange(FrozenSchema):
    """Half-open calendar range ``[start_date, end_date)``."""

    start_date: Date
    end_date: Date

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self

    @property
    def day_count(self) -> int:
        return days_between(self.start_date, self.end_date)

    def days(self) -> Iterator[Date]:
        return iter_days(self.start_date, self.end_date)


class ReservationRequest(FrozenSchema):
    """A candidate reservation as entered in the wizard."""

    tenant_id: int = Field(..., ge=1)
    room: Room
    rental_type: RentalType
    start_date: Union[Date, str, None] = None
    end_date: Union[Date, str, None] = None
    months_to_rent: Optional[int] = None


class ReservationError(FrozenSchema):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ReservationQuote(FrozenSchema):
    """Availability verdict and price for a candidate reservation."""

    is_available: bool = False
    check_in_date: Optional[Date] = None
    check_out_date: Optional[Date] = None
    rental_type: Optional[RentalType] = None
    duration_units: int = Field(0, ge=0)
    rate: Decimal = Decimal("0.00")
    total_amount: Decimal = Decimal("0.00")
    conflicting_bookings: List[Booking] = Field(default_factory=list)
    active_bookings: List[Booking] = Field(default_factory=list)
    blackout_conflicts: List[Date] = Field(default_factory=list)
    currency: str = Field(default_factory=lambda: settings.CURRENCY)
    error: Optional[ReservationError] = None
