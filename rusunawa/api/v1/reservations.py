"""
Reservation quote endpoint.

The caller supplies the tenant's bookings and the room's blacked-out days,
so a quote is computed purely from the request body.
"""

from datetime import date as Date
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from rusunawa.core.logging import get_logger
from rusunawa.schemas.booking import Booking
from rusunawa.schemas.reservation import ReservationQuote, ReservationRequest
from rusunawa.services.booking import ReservationEngine

router = APIRouter(prefix="/reservations")
logger = get_logger(__name__)


class QuoteRequest(ReservationRequest):
    existing_bookings: List[Booking] = Field(default_factory=list)
    unavailable_dates: List[Date] = Field(default_factory=list)
    earliest_check_in: Optional[Date] = None


def get_reservation_engine() -> ReservationEngine:
    return ReservationEngine()


@router.post("/quote", response_model=ReservationQuote)
async def quote(
    request: QuoteRequest,
    engine: ReservationEngine = Depends(get_reservation_engine),
) -> ReservationQuote:
    return engine.quote(
        request,
        request.existing_bookings,
        unavailable_dates=request.unavailable_dates,
        earliest_check_in=request.earliest_check_in,
    )
