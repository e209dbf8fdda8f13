"""
Enumerations shared by the booking core schemas.
"""

from enum import Enum

__all__ = [
    "DocumentStatus",
    "VerificationStatusType",
    "TenantCategory",
    "BookingStatus",
    "ACTIVE_BOOKING_STATUSES",
    "RentalTypeName",
    "WizardStep",
]


class DocumentStatus(str, Enum):
    """Document review status. `MISSING` is synthesized, never stored."""

    MISSING = "missing"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationStatusType(str, Enum):
    """Severity of a verification verdict, as shown to the tenant."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class TenantCategory(str, Enum):
    """Tenant category; decides which documents are required."""

    STUDENT = "student"
    NON_STUDENT = "non_student"

    @classmethod
    def from_tenant_type_name(cls, name, student_type_name: str = "mahasiswa") -> "TenantCategory":
        if name and str(name).strip().lower() == student_type_name.lower():
            return cls.STUDENT
        return cls.NON_STUDENT


class BookingStatus(str, Enum):
    """Booking status enumeration."""

    PENDING = "pending"
    APPROVED = "approved"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    EXPIRED = "expired"

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_BOOKING_STATUSES


ACTIVE_BOOKING_STATUSES = frozenset(
    {BookingStatus.PENDING, BookingStatus.APPROVED, BookingStatus.CHECKED_IN}
)


class RentalTypeName(str, Enum):
    """Duration/pricing model of a rental."""

    HARIAN = "harian"
    BULANAN = "bulanan"


class WizardStep(str, Enum):
    """Booking wizard steps, in order."""

    ROOM_DETAILS = "room_details"
    SELECT_DATES = "select_dates"
    REVIEW_AND_PAY = "review_and_pay"
    CONFIRMATION = "confirmation"

    @property
    def index(self) -> int:
        return list(WizardStep).index(self)
