# rusunawa/services/booking/booking_wizard.py
"""
Booking wizard orchestration.

Steps run strictly in order:

    ROOM_DETAILS -> SELECT_DATES -> REVIEW_AND_PAY -> CONFIRMATION

Each transition returns a `ServiceResult` whose `data` is the wizard state
after the call (the unchanged state when the transition was refused).
States are immutable; the wizard only swaps its `state` reference.
"""

from datetime import date
from typing import Callable, List, Optional

from rusunawa.core.exceptions import (
    ActiveBookingConflictError,
    BackendUnavailableError,
    ErrorCode,
    InvalidTransitionError,
    ReservationRejectedError,
    SubmissionRejectedError,
    VerificationUnavailableError,
)
from rusunawa.core.logging import get_logger
from rusunawa.integrations.base import BookingBackend
from rusunawa.schemas.booking import Booking, BookingCreate
from rusunawa.schemas.common.enums import WizardStep
from rusunawa.schemas.reservation import ReservationError, ReservationQuote, ReservationRequest
from rusunawa.schemas.room import RentalType, Room, RoomAvailabilityDay
from rusunawa.schemas.tenant import TenantProfile
from rusunawa.schemas.wizard import WizardState
from rusunawa.services.base.service_result import ErrorSeverity, ServiceError, ServiceResult
from rusunawa.services.booking.reservation_engine import (
    ReservationEngine,
    active_bookings_for,
    find_blocking_booking,
    to_reservation_error,
    unavailable_dates_from,
    unverifiable_quote,
)
from rusunawa.services.verification.verification_status_service import VerificationStatusService

WizardResult = ServiceResult[WizardState]


class BookingWizard:
    """
    Drives one tenant through booking one room.

    Fetches happen inside `validate_dates()` and `submit()`; their results
    are applied only if no input changed while they were in flight.
    """

    def __init__(
        self,
        backend: BookingBackend,
        tenant: TenantProfile,
        room: Room,
        rental_type: RentalType,
        engine: Optional[ReservationEngine] = None,
        verification_service: Optional[VerificationStatusService] = None,
        today: Callable[[], date] = date.today,
    ):
        self.backend = backend
        self.tenant = tenant
        self.engine = engine or ReservationEngine()
        self.verification_service = verification_service or VerificationStatusService(backend)
        self._today = today
        self.state = WizardState(
            tenant_id=tenant.tenant_id,
            room=room,
            rental_type=rental_type,
            months_to_rent=1 if rental_type.is_monthly else None,
        )
        self._logger = get_logger(self.__class__.__name__).add_context(
            tenant_ref=tenant.tenant_id, room_ref=room.room_id
        )

    @classmethod
    async def open(
        cls,
        backend: BookingBackend,
        tenant_id: int,
        room: Room,
        rental_type_id: Optional[int] = None,
        **kwargs,
    ) -> "BookingWizard":
        """
        Load the tenant profile and rental types, then start a wizard.

        The rental type defaults to the room's own, then to monthly.
        """
        tenant = await backend.get_tenant_profile(tenant_id)
        rental_types = await backend.get_rental_types()
        rental_type = _pick_rental_type(rental_types, room, rental_type_id)
        return cls(backend, tenant, room, rental_type, **kwargs)

    # ==================== NAVIGATION ====================

    def next(self) -> WizardResult:
        step = self.state.step

        if step is WizardStep.ROOM_DETAILS:
            return self._advance(step=WizardStep.SELECT_DATES, error=None)

        if step is WizardStep.SELECT_DATES:
            quote = self.state.quote
            if quote is None:
                return self._refuse(ReservationError(
                    code=ErrorCode.DATE_RANGE_INVALID.value,
                    message="Please select your dates and check availability first",
                ))
            if not quote.is_available or quote.total_amount <= 0:
                return self._refuse(quote.error or ReservationError(
                    code=ErrorCode.INVALID_AMOUNT.value,
                    message="Total amount must be greater than zero",
                ))
            return self._advance(step=WizardStep.REVIEW_AND_PAY, error=None)

        if step is WizardStep.REVIEW_AND_PAY:
            return self._invalid_transition("advance without submitting")
        return self._invalid_transition("advance")

    def previous(self) -> WizardResult:
        step = self.state.step
        if step in (WizardStep.ROOM_DETAILS, WizardStep.CONFIRMATION):
            return self._invalid_transition("go back")
        prior = list(WizardStep)[step.index - 1]
        return self._advance(step=prior, error=None)

    def reset(self) -> WizardResult:
        """Start over at room details; in-flight fetches are discarded."""
        state = self.state
        self.state = WizardState(
            tenant_id=state.tenant_id,
            room=state.room,
            rental_type=state.rental_type,
            months_to_rent=1 if state.rental_type.is_monthly else None,
            generation=state.generation + 1,
        )
        return ServiceResult.success(self.state)

    # ==================== INPUT ====================

    def select_rental_type(self, rental_type: RentalType) -> WizardResult:
        """Switch duration model; dates and price must be entered and checked again."""
        if self.state.is_terminal:
            return self._invalid_transition("change rental type")

        step = self.state.step
        if step is WizardStep.REVIEW_AND_PAY:
            step = WizardStep.SELECT_DATES

        return self._advance(
            step=step,
            rental_type=rental_type,
            start_date=None,
            end_date=None,
            months_to_rent=1 if rental_type.is_monthly else None,
            quote=None,
            error=None,
            generation=self.state.generation + 1,
        )

    def select_dates(
        self,
        start_date,
        end_date=None,
        months_to_rent: Optional[int] = None,
    ) -> WizardResult:
        """Record the requested stay. For monthly rentals the end date is derived."""
        if self.state.step is not WizardStep.SELECT_DATES:
            return self._invalid_transition("select dates")

        if self.state.rental_type.is_monthly:
            end_date = None
            if months_to_rent is None:
                months_to_rent = self.state.months_to_rent

        return self._advance(
            start_date=start_date,
            end_date=end_date,
            months_to_rent=months_to_rent,
            quote=None,
            error=None,
            generation=self.state.generation + 1,
        )

    # ==================== VALIDATION ====================

    def _build_request(self, state: WizardState) -> ReservationRequest:
        return ReservationRequest(
            tenant_id=state.tenant_id,
            room=state.room,
            rental_type=state.rental_type,
            start_date=state.start_date,
            end_date=state.end_date,
            months_to_rent=state.months_to_rent,
        )

    async def validate_dates(self) -> WizardResult:
        """
        Check availability and price for the selected dates.

        Malformed dates are rejected before anything is fetched. A failed
        bookings or availability fetch yields an unavailable quote.
        """
        state = self.state
        if state.step is not WizardStep.SELECT_DATES:
            return self._invalid_transition("validate dates")

        generation = state.generation
        request = self._build_request(state)
        today = self._today()

        try:
            date_range, _ = self.engine.resolve_date_range(request, earliest_check_in=today)
        except ReservationRejectedError as e:
            quote = ReservationQuote(
                is_available=False,
                rental_type=request.rental_type,
                rate=request.room.rate,
                error=to_reservation_error(e),
            )
            return self._apply_quote(quote, generation)

        quote = await self._fetch_and_quote(request, date_range.start_date, date_range.end_date, today)
        return self._apply_quote(quote, generation)

    async def _fetch_and_quote(
        self,
        request: ReservationRequest,
        start_date: date,
        end_date: date,
        today: date,
    ) -> ReservationQuote:
        try:
            bookings = await self.backend.get_tenant_bookings(request.tenant_id)
        except BackendUnavailableError as e:
            self._logger.warning(f"Bookings fetch failed, treating room as unavailable: {e.message}")
            return unverifiable_quote(request)

        try:
            availability: List[RoomAvailabilityDay] = await self.backend.get_room_availability(
                request.room.room_id, start_date, end_date
            )
        except BackendUnavailableError as e:
            self._logger.warning(f"Availability fetch failed, treating room as unavailable: {e.message}")
            return unverifiable_quote(request, "Unable to check room availability. Please try again later.")

        return self.engine.quote(
            request,
            bookings,
            unavailable_dates_from(availability),
            earliest_check_in=today,
        )

    def _apply_quote(self, quote: ReservationQuote, generation: int) -> WizardResult:
        if self.state.generation != generation:
            return self._stale()

        result = self._advance(quote=quote, error=quote.error)
        if quote.is_available:
            return result
        return ServiceResult.failure(_service_error(quote.error), data=self.state)

    # ==================== SUBMISSION ====================

    async def submit(self) -> WizardResult:
        """
        Create the booking.

        Re-checks document verification and the tenant's active bookings
        first. Any failure keeps the wizard on the review step; a backend
        rejection is reported as-is and never retried.
        """
        state = self.state
        if state.step is not WizardStep.REVIEW_AND_PAY:
            return self._invalid_transition("submit")
        quote = state.quote
        if quote is None or not quote.is_available:
            return self._refuse(ReservationError(
                code=ErrorCode.DATE_RANGE_INVALID.value,
                message="Selected dates are no longer valid",
            ))

        generation = state.generation

        check = await self.verification_service.check(self.tenant)
        if self.state.generation != generation:
            return self._stale()
        if check.fetch_failed:
            unavailable = VerificationUnavailableError(check.verdict.message, details={"reason": check.error})
            return self._refuse(to_reservation_error(unavailable), verdict=check.verdict)
        if not check.verdict.can_book:
            return self._refuse(ReservationError(
                code=ErrorCode.VERIFICATION_INCOMPLETE.value,
                message=check.verdict.message,
                details={"missing_documents": [d.model_dump(mode="json") for d in check.verdict.missing_documents]},
            ), verdict=check.verdict)

        try:
            bookings = await self.backend.get_tenant_bookings(state.tenant_id)
        except BackendUnavailableError as e:
            self._logger.warning(f"Bookings re-check failed before submission: {e.message}")
            return self._refuse(unverifiable_quote(self._build_request(state)).error, verdict=check.verdict)
        if self.state.generation != generation:
            return self._stale()

        active = active_bookings_for(state.tenant_id, bookings)
        if active:
            blocking = find_blocking_booking(active)
            conflict = ActiveBookingConflictError(
                booking_id=blocking.booking_id,
                room_id=blocking.room_id,
                room_name=blocking.room_name,
                check_out_date=blocking.check_out_date,
            )
            return self._refuse(to_reservation_error(conflict), verdict=check.verdict)

        payload = BookingCreate(
            tenant_id=state.tenant_id,
            room_id=state.room.room_id,
            check_in_date=quote.check_in_date,
            check_out_date=quote.check_out_date,
            rental_type_id=state.rental_type.rental_type_id,
            total_amount=quote.total_amount,
        )

        try:
            booking: Booking = await self.backend.create_booking(payload)
        except (SubmissionRejectedError, BackendUnavailableError) as e:
            self._logger.info(f"Booking creation refused: {e.message}", extra={"error_code": e.error_code.value})
            return self._refuse(to_reservation_error(e), verdict=check.verdict)

        # The backend has committed the booking, so confirmation is shown even
        # if the tenant touched the form meanwhile.
        self._logger.info("Booking created", extra={"booking_ref": booking.booking_id})
        self.state = self.state.model_copy(update={
            "step": WizardStep.CONFIRMATION,
            "booking": booking,
            "verdict": check.verdict,
            "error": None,
        })
        return ServiceResult.success(self.state, message="Booking created successfully")

    # ==================== HELPERS ====================

    def _advance(self, **update) -> WizardResult:
        self.state = self.state.model_copy(update=update)
        return ServiceResult.success(self.state)

    def _refuse(self, error: ReservationError, **update) -> WizardResult:
        self.state = self.state.model_copy(update={"error": error, **update})
        return ServiceResult.failure(_service_error(error), data=self.state)

    def _invalid_transition(self, action: str) -> WizardResult:
        exc = InvalidTransitionError(self.state.step.value, action)
        return ServiceResult.from_exception(exc, data=self.state, severity=ErrorSeverity.WARNING)

    def _stale(self) -> WizardResult:
        self._logger.debug("Discarding stale fetch result")
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.STALE_RESPONSE,
                message="Input changed while checking; result discarded",
                severity=ErrorSeverity.INFO,
            ),
            data=self.state,
        )


def _service_error(error: ReservationError) -> ServiceError:
    return ServiceError(
        code=ErrorCode(error.code),
        message=error.message,
        details=dict(error.details),
    )


def _pick_rental_type(
    rental_types: List[RentalType],
    room: Room,
    rental_type_id: Optional[int],
) -> RentalType:
    if rental_type_id is not None:
        for rental_type in rental_types:
            if rental_type.rental_type_id == rental_type_id:
                return rental_type
        raise ValueError(f"Unknown rental type id: {rental_type_id}")
    if room.rental_type is not None:
        return room.rental_type
    for rental_type in rental_types:
        if rental_type.is_monthly:
            return rental_type
    if not rental_types:
        raise ValueError("No rental types available")
    return rental_types[0]
