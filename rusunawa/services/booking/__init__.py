"""
Booking service package: reservation pricing/conflict engine and the
booking wizard that drives it.
"""

from rusunawa.services.booking.booking_wizard import BookingWizard
from rusunawa.services.booking.reservation_engine import (
    ReservationEngine,
    active_bookings_for,
    calculate_duration_units,
    calculate_total_amount,
    derive_monthly_end_date,
    find_blackout_dates,
    find_blocking_booking,
    find_conflicting_bookings,
    format_duration,
    intervals_overlap,
    unavailable_dates_from,
    unverifiable_quote,
)

__all__ = [
    "BookingWizard",
    "ReservationEngine",
    "active_bookings_for",
    "calculate_duration_units",
    "calculate_total_amount",
    "derive_monthly_end_date",
    "find_blackout_dates",
    "find_blocking_booking",
    "find_conflicting_bookings",
    "format_duration",
    "intervals_overlap",
    "unavailable_dates_from",
    "unverifiable_quote",
]
