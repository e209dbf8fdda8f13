# rusunawa/services/booking/reservation_engine.py
"""
Reservation conflict and pricing engine.

Given a room, rental type and candidate dates, decides whether the tenant
may reserve and what it costs. All functions here are pure: bookings and
blackout dates come in as already-fetched snapshots.

Duration model:
- harian (daily): units = days in [start, end), at least 1.
- bulanan (monthly): units = the chosen month count; the end date is
  derived by calendar-month addition (clamped to month end), and the
  resulting span must cover at least the configured minimum of days.
"""

import math
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from rusunawa.config.settings import settings
from rusunawa.core.exceptions import (
    ActiveBookingConflictError,
    BaseAppException,
    DateBlackoutError,
    DateRangeInvalidError,
    DurationTooShortError,
    ErrorCode,
    ReservationRejectedError,
)
from rusunawa.core.logging import get_logger
from rusunawa.schemas.booking import Booking
from rusunawa.schemas.reservation import DateRange, ReservationError, ReservationQuote, ReservationRequest
from rusunawa.schemas.room import RentalType, RoomAvailabilityDay
from rusunawa.utils.date_utils import DateUtilsError, add_months, parse_optional_date

logger = get_logger(__name__)


# ==================== INTERVALS ====================

def intervals_overlap(first: DateRange, second: DateRange) -> bool:
    """Half-open overlap: ranges that only share a boundary day do not conflict."""
    return first.start_date < second.end_date and first.end_date > second.start_date


def booking_range(booking: Booking) -> DateRange:
    return DateRange(start_date=booking.check_in_date, end_date=booking.check_out_date)


def active_bookings_for(tenant_id: int, bookings: Iterable[Booking]) -> List[Booking]:
    """The tenant's bookings that still count: pending, approved or checked in."""
    return [b for b in bookings if b.tenant_id == tenant_id and b.is_active]


def find_conflicting_bookings(date_range: DateRange, bookings: Iterable[Booking]) -> List[Booking]:
    """Active bookings whose stay overlaps ``date_range``, in any room."""
    return [
        b for b in bookings
        if b.is_active and intervals_overlap(date_range, booking_range(b))
    ]


def find_blocking_booking(
    active_bookings: Sequence[Booking],
    conflicting_bookings: Sequence[Booking] = (),
) -> Optional[Booking]:
    """
    Booking to report when the one-active-booking rule denies a request.

    An overlapping booking is the most relevant one; otherwise the active
    booking that ends last.
    """
    if conflicting_bookings:
        return conflicting_bookings[0]
    if not active_bookings:
        return None
    return max(active_bookings, key=lambda b: b.check_out_date)


# ==================== BLACKOUT ====================

def unavailable_dates_from(rows: Iterable[RoomAvailabilityDay]) -> List[date]:
    return [row.date for row in rows if not row.is_available]


def find_blackout_dates(date_range: DateRange, unavailable_dates: Iterable[date]) -> List[date]:
    """Days of ``date_range`` that are blacked out, in calendar order."""
    blocked = set(unavailable_dates)
    return [day for day in date_range.days() if day in blocked]


# ==================== DURATION & PRICE ====================

def derive_monthly_end_date(start_date: date, months_to_rent: int) -> date:
    return add_months(start_date, months_to_rent)


def calculate_duration_units(
    rental_type: RentalType,
    date_range: DateRange,
    months_to_rent: Optional[int] = None,
) -> int:
    if rental_type.is_monthly:
        if months_to_rent is None:
            raise DateRangeInvalidError("Number of months is required for monthly rental", field="months_to_rent")
        return months_to_rent
    return max(1, math.ceil(date_range.day_count))


def calculate_total_amount(rate: Decimal, duration_units: int) -> Decimal:
    return (rate * duration_units).quantize(Decimal("0.01"))


def format_duration(duration_units: int, rental_type: RentalType) -> str:
    """Human label such as ``3 days`` or ``1 month``."""
    unit = rental_type.unit_label
    return f"{duration_units} {unit}{'' if duration_units == 1 else 's'}"


def to_reservation_error(exception: BaseAppException) -> ReservationError:
    return ReservationError(
        code=exception.error_code.value,
        message=exception.message,
        details=exception.details,
    )


def unverifiable_quote(
    request: ReservationRequest,
    reason: str = "Unable to verify existing bookings. Please try again later.",
) -> ReservationQuote:
    """Fail-closed quote for when the conflict check could not run."""
    return ReservationQuote(
        is_available=False,
        rental_type=request.rental_type,
        rate=request.room.rate,
        error=ReservationError(code=ErrorCode.CONFLICT_CHECK_UNAVAILABLE.value, message=reason),
    )


# ==================== ENGINE ====================

class ReservationEngine:
    """
    Evaluates a `ReservationRequest` against the tenant's bookings and the
    room's blackout dates.

    Validation order: dates present and parseable, start before end,
    monthly minimum span. These short-circuit. Blackout days and the
    tenant's active bookings are then both evaluated; the reported error is
    the blackout one when both fail.
    """

    def __init__(
        self,
        monthly_min_days: Optional[int] = None,
        max_months_to_rent: Optional[int] = None,
    ):
        self.monthly_min_days = settings.MONTHLY_MIN_DAYS if monthly_min_days is None else monthly_min_days
        self.max_months_to_rent = settings.MAX_MONTHS_TO_RENT if max_months_to_rent is None else max_months_to_rent

    def resolve_date_range(
        self,
        request: ReservationRequest,
        earliest_check_in: Optional[date] = None,
    ) -> Tuple[DateRange, int]:
        """
        Validate the requested dates and compute the duration units.

        Raises:
            DateRangeInvalidError: missing, malformed or inverted dates, or
                an out-of-range month count
            DurationTooShortError: monthly span below the minimum day count
        """
        start_date = self._parse(request.start_date, "start_date", "Start date")
        rental_type = request.rental_type

        if rental_type.is_monthly:
            months = request.months_to_rent
            if months is None:
                raise DateRangeInvalidError("Number of months is required for monthly rental", field="months_to_rent")
            if not 1 <= months <= self.max_months_to_rent:
                raise DateRangeInvalidError(
                    f"Number of months must be between 1 and {self.max_months_to_rent}",
                    field="months_to_rent",
                )
            end_date = derive_monthly_end_date(start_date, months)
        else:
            end_date = self._parse(request.end_date, "end_date", "End date")

        if start_date >= end_date:
            raise DateRangeInvalidError("End date must be after start date", field="end_date")

        if earliest_check_in is not None and start_date < earliest_check_in:
            raise DateRangeInvalidError("Start date cannot be in the past", field="start_date")

        date_range = DateRange(start_date=start_date, end_date=end_date)

        if rental_type.is_monthly and date_range.day_count < self.monthly_min_days:
            raise DurationTooShortError(date_range.day_count, self.monthly_min_days)

        units = calculate_duration_units(rental_type, date_range, request.months_to_rent)
        return date_range, units

    def quote(
        self,
        request: ReservationRequest,
        existing_bookings: Iterable[Booking],
        unavailable_dates: Iterable[date] = (),
        earliest_check_in: Optional[date] = None,
    ) -> ReservationQuote:
        """Availability verdict and total price for ``request``."""
        try:
            date_range, units = self.resolve_date_range(request, earliest_check_in)
        except ReservationRejectedError as e:
            logger.info(
                f"Reservation rejected: {e.message}",
                extra={"error_code": e.error_code.value, "tenant_ref": request.tenant_id},
            )
            return ReservationQuote(
                is_available=False,
                rental_type=request.rental_type,
                rate=request.room.rate,
                error=to_reservation_error(e),
            )

        total_amount = calculate_total_amount(request.room.rate, units)

        blackout_conflicts = find_blackout_dates(date_range, unavailable_dates)
        active = active_bookings_for(request.tenant_id, existing_bookings)
        conflicting = find_conflicting_bookings(date_range, active)

        error: Optional[ReservationRejectedError] = None
        if blackout_conflicts:
            error = DateBlackoutError(blackout_conflicts[0])
        elif active:
            blocking = find_blocking_booking(active, conflicting)
            error = ActiveBookingConflictError(
                booking_id=blocking.booking_id,
                room_id=blocking.room_id,
                room_name=blocking.room_name,
                check_out_date=blocking.check_out_date,
            )

        quote = ReservationQuote(
            is_available=error is None,
            check_in_date=date_range.start_date,
            check_out_date=date_range.end_date,
            rental_type=request.rental_type,
            duration_units=units,
            rate=request.room.rate,
            total_amount=total_amount,
            conflicting_bookings=conflicting,
            active_bookings=active,
            blackout_conflicts=blackout_conflicts,
            error=to_reservation_error(error) if error else None,
        )

        logger.debug(
            "Reservation quoted",
            extra={
                "tenant_ref": request.tenant_id,
                "room_ref": request.room.room_id,
                "is_available": quote.is_available,
                "duration_units": units,
                "total_amount": str(total_amount),
            },
        )
        return quote

    @staticmethod
    def _parse(value, field: str, label: str) -> date:
        try:
            parsed = parse_optional_date(value)
        except DateUtilsError as e:
            raise DateRangeInvalidError(f"Invalid {label.lower()}", field=field) from e
        if parsed is None:
            raise DateRangeInvalidError(f"{label} is required", field=field)
        return parsed
