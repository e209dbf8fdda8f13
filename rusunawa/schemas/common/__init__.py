from rusunawa.schemas.common.base import BaseSchema, FrozenSchema, coerce_calendar_date
from rusunawa.schemas.common.enums import (
    ACTIVE_BOOKING_STATUSES,
    BookingStatus,
    DocumentStatus,
    RentalTypeName,
    TenantCategory,
    VerificationStatusType,
    WizardStep,
)

__all__ = [
    "BaseSchema",
    "FrozenSchema",
    "coerce_calendar_date",
    "ACTIVE_BOOKING_STATUSES",
    "BookingStatus",
    "DocumentStatus",
    "RentalTypeName",
    "TenantCategory",
    "VerificationStatusType",
    "WizardStep",
]
