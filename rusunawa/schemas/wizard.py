"""
Booking wizard state.

Every transition produces a new `WizardState`; nothing is patched in place.
"""

from __future__ import annotations

from datetime import date as Date
from typing import Optional, Union

from pydantic import Field

from rusunawa.schemas.booking import Booking
from rusunawa.schemas.common.base import FrozenSchema
from rusunawa.schemas.common.enums import WizardStep
from rusunawa.schemas.reservation import ReservationError, ReservationQuote
from rusunawa.schemas.room import RentalType, Room
from rusunawa.schemas.verification import VerificationVerdict

__all__ = ["WizardState"]


class WizardState(FrozenSchema):
    step: WizardStep = WizardStep.ROOM_DETAILS
    tenant_id: int = Field(..., ge=1)
    room: Room
    rental_type: RentalType

    start_date: Union[Date, str, None] = None
    end_date: Union[Date, str, None] = None
    months_to_rent: Optional[int] = None

    quote: Optional[ReservationQuote] = None
    verdict: Optional[VerificationVerdict] = None
    booking: Optional[Booking] = None
    error: Optional[ReservationError] = None

    # Bumped whenever input changes; fetch results tagged with an older
    # generation are discarded.
    generation: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.step is WizardStep.CONFIRMATION
