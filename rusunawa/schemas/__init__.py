"""
Pydantic schemas for the booking core.
"""

from rusunawa.schemas.booking import Booking, BookingCreate
from rusunawa.schemas.document import Document, DocumentType, MissingDocument, RequiredDocument
from rusunawa.schemas.reservation import DateRange, ReservationError, ReservationQuote, ReservationRequest
from rusunawa.schemas.room import RentalType, Room, RoomAvailabilityDay
from rusunawa.schemas.tenant import TenantProfile, TenantType
from rusunawa.schemas.verification import VerificationCheck, VerificationVerdict
from rusunawa.schemas.wizard import WizardState

__all__ = [
    "Booking",
    "BookingCreate",
    "DateRange",
    "Document",
    "DocumentType",
    "MissingDocument",
    "RentalType",
    "RequiredDocument",
    "ReservationError",
    "ReservationQuote",
    "ReservationRequest",
    "Room",
    "RoomAvailabilityDay",
    "TenantProfile",
    "TenantType",
    "VerificationCheck",
    "VerificationVerdict",
    "WizardState",
]
