"""
Custom Exceptions for the Rusunawa Booking Core

This module defines the exception classes raised by the verification,
reservation and submission layers, with structured error information that
the wizard and the HTTP API turn into user-facing alerts.
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from rusunawa.utils.date_utils import format_long_date


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    STALE_RESPONSE = "STALE_RESPONSE"

    # Verification
    VERIFICATION_UNAVAILABLE = "VERIFICATION_UNAVAILABLE"
    VERIFICATION_INCOMPLETE = "VERIFICATION_INCOMPLETE"

    # Reservation
    DATE_RANGE_INVALID = "DATE_RANGE_INVALID"
    DURATION_TOO_SHORT = "DURATION_TOO_SHORT"
    DATE_BLACKOUT = "DATE_BLACKOUT"
    ACTIVE_BOOKING_CONFLICT = "ACTIVE_BOOKING_CONFLICT"
    CONFLICT_CHECK_UNAVAILABLE = "CONFLICT_CHECK_UNAVAILABLE"
    INVALID_AMOUNT = "INVALID_AMOUNT"

    # Backend
    SUBMISSION_REJECTED = "SUBMISSION_REJECTED"
    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# Verification
# ========================================

class VerificationUnavailableError(BaseAppException):
    """Raised when the tenant's documents or profile could not be fetched"""

    def __init__(
        self,
        message: str = "Unable to verify document status",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.VERIFICATION_UNAVAILABLE, details, 503)


# ========================================
# Reservation
# ========================================

class ReservationRejectedError(BaseAppException):
    """Base class for a candidate reservation that fails a booking rule"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 422
    ):
        super().__init__(message, error_code, details, status_code)


class DateRangeInvalidError(ReservationRejectedError):
    """Malformed, missing or inverted dates"""

    def __init__(self, message: str = "Invalid date range", field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, ErrorCode.DATE_RANGE_INVALID, details)


class DurationTooShortError(ReservationRejectedError):
    """Monthly booking spanning fewer days than the configured floor"""

    def __init__(self, actual_days: int, minimum_days: int):
        super().__init__(
            f"Monthly bookings must span at least {minimum_days} days "
            f"(selected period is {actual_days} days)",
            ErrorCode.DURATION_TOO_SHORT,
            {"actual_days": actual_days, "minimum_days": minimum_days},
        )


class DateBlackoutError(ReservationRejectedError):
    """A requested day is marked unavailable for the room"""

    def __init__(self, blackout_date: date):
        super().__init__(
            f"The room is not available on {blackout_date.isoformat()}",
            ErrorCode.DATE_BLACKOUT,
            {"date": blackout_date.isoformat()},
            409,
        )


class ActiveBookingConflictError(ReservationRejectedError):
    """The tenant already holds an active booking somewhere in the system"""

    def __init__(
        self,
        booking_id: Optional[int],
        room_id: Optional[int],
        room_name: Optional[str],
        check_out_date: date,
    ):
        room_label = room_name or "another room"
        super().__init__(
            f"You have an active booking in {room_label} that must be completed first. "
            f"You can make a new booking after your current booking ends on {format_long_date(check_out_date)}.",
            ErrorCode.ACTIVE_BOOKING_CONFLICT,
            {
                "booking_id": booking_id,
                "room_id": room_id,
                "room_name": room_name,
                "check_out_date": check_out_date.isoformat(),
            },
            409,
        )


# ========================================
# Backend
# ========================================

class BackendUnavailableError(BaseAppException):
    """Transport-level failure talking to the rusunawa backend"""

    def __init__(self, message: str = "Rusunawa backend is unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.BACKEND_UNAVAILABLE, details, 502)


class SubmissionRejectedError(BaseAppException):
    """The backend refused to create the booking; message is kept verbatim"""

    def __init__(self, message: str = "Failed to create booking", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.SUBMISSION_REJECTED, details, 409)


# ========================================
# Wizard
# ========================================

class InvalidTransitionError(BaseAppException):
    """A wizard transition was requested from a step that does not allow it"""

    def __init__(self, current_step: str, action: str):
        super().__init__(
            f"Cannot {action} from step '{current_step}'",
            ErrorCode.INVALID_TRANSITION,
            {"current_step": current_step, "action": action},
            409,
        )


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "VerificationUnavailableError",
    "ReservationRejectedError",
    "DateRangeInvalidError",
    "DurationTooShortError",
    "DateBlackoutError",
    "ActiveBookingConflictError",
    "BackendUnavailableError",
    "SubmissionRejectedError",
    "InvalidTransitionError",
]
