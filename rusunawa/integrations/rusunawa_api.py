"""
HTTP client for the rusunawa REST backend.

Implements `BookingBackend` on top of `httpx.AsyncClient`. Transport
failures, unexpected statuses and malformed payloads surface as
`BackendUnavailableError`; a refused booking creation surfaces as
`SubmissionRejectedError` carrying the backend's own message.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from rusunawa.config.settings import settings
from rusunawa.core.exceptions import BackendUnavailableError, SubmissionRejectedError
from rusunawa.core.logging import get_logger
from rusunawa.schemas.booking import Booking, BookingCreate
from rusunawa.schemas.common.enums import BookingStatus
from rusunawa.schemas.document import Document
from rusunawa.schemas.room import RentalType, RoomAvailabilityDay
from rusunawa.schemas.tenant import TenantProfile

logger = get_logger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)


class RusunawaApiClient:
    """Async client for the endpoints the booking flow depends on."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        token = token if token is not None else settings.BACKEND_API_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.BACKEND_API_URL).rstrip("/"),
            headers=headers,
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "RusunawaApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ==================== TRANSPORT ====================

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(
                f"Request to backend failed: {method} {path}: {e}",
                extra={"exception_type": type(e).__name__},
            )
            raise BackendUnavailableError(
                "Unable to reach the rusunawa backend",
                details={"path": path, "reason": str(e)},
            ) from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BackendUnavailableError(
                "Backend returned a non-JSON response",
                details={"path": response.request.url.path, "status_code": response.status_code},
            ) from e

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._send("GET", path, params=params)
        if response.is_error:
            raise BackendUnavailableError(
                f"Backend returned HTTP {response.status_code}",
                details={"path": path, "status_code": response.status_code},
            )
        return self._json(response)

    @staticmethod
    def _unwrap(payload: Any, key: str) -> Any:
        if isinstance(payload, dict) and key in payload:
            return payload[key]
        return payload

    @staticmethod
    def _parse(model: Type[TModel], data: Any, what: str) -> TModel:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise BackendUnavailableError(
                f"Malformed {what} in backend response",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    def _parse_list(self, model: Type[TModel], items: Any, what: str) -> List[TModel]:
        if items is None:
            return []
        if not isinstance(items, list):
            raise BackendUnavailableError(f"Expected a list of {what} from backend")
        return [self._parse(model, item, what) for item in items]

    # ==================== READS ====================

    async def get_tenant_documents(self, tenant_id: int) -> List[Document]:
        payload = await self._get_json(f"/v1/tenants/{tenant_id}/documents")
        return self._parse_list(Document, self._unwrap(payload, "documents"), "documents")

    async def get_tenant_bookings(self, tenant_id: int) -> List[Booking]:
        payload = await self._get_json(f"/v1/tenants/{tenant_id}/bookings")
        items = self._unwrap(payload, "bookings")
        if isinstance(items, list):
            # The tenant bookings endpoint may omit the owner on each row
            items = [
                {"tenantId": tenant_id, **item} if isinstance(item, dict) else item
                for item in items
            ]
        return self._parse_list(Booking, items, "bookings")

    async def get_room_availability(
        self, room_id: int, start_date: date, end_date: date
    ) -> List[RoomAvailabilityDay]:
        path = f"/v1/rooms/{room_id}/availability"
        params = {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()}
        response = await self._send("GET", path, params=params)

        # Rooms without an availability calendar have no blacked-out days
        if response.status_code == 404:
            logger.debug(f"No availability calendar for room {room_id}")
            return []
        if response.is_error:
            raise BackendUnavailableError(
                f"Backend returned HTTP {response.status_code}",
                details={"path": path, "status_code": response.status_code},
            )
        payload = self._json(response)
        return self._parse_list(RoomAvailabilityDay, self._unwrap(payload, "availability"), "availability")

    async def get_rental_types(self) -> List[RentalType]:
        payload = await self._get_json("/v1/rental-types")
        items = self._unwrap(payload, "rentalTypes")
        items = self._unwrap(items, "rental_types")
        return self._parse_list(RentalType, items, "rental types")

    async def get_tenant_profile(self, tenant_id: int) -> TenantProfile:
        payload = await self._get_json(f"/v1/tenants/{tenant_id}")
        return self._parse(TenantProfile, self._unwrap(payload, "tenant"), "tenant")

    # ==================== WRITES ====================

    async def create_booking(self, payload: BookingCreate) -> Booking:
        response = await self._send("POST", "/v1/bookings", json=payload.to_api())

        if response.status_code >= 500:
            raise BackendUnavailableError(
                f"Backend returned HTTP {response.status_code}",
                details={"path": "/v1/bookings", "status_code": response.status_code},
            )

        if response.is_error:
            raise SubmissionRejectedError(
                _rejection_message(response),
                details={"status_code": response.status_code},
            )

        body = self._json(response) if response.content else {}
        status = body.get("status") if isinstance(body, dict) else None
        if isinstance(status, dict) and status.get("status") == "error":
            raise SubmissionRejectedError(status.get("message") or "Booking failed")

        # Fields the backend leaves out are the ones it just stored from the payload
        submitted = {
            "tenantId": payload.tenant_id,
            "roomId": payload.room_id,
            "checkInDate": payload.check_in_date.isoformat(),
            "checkOutDate": payload.check_out_date.isoformat(),
            "rentalTypeId": payload.rental_type_id,
            "totalAmount": str(payload.total_amount),
            "status": BookingStatus.PENDING.value,
        }

        data = body
        if isinstance(body, dict):
            if isinstance(body.get("booking"), dict):
                data = {**submitted, **body["booking"]}
            elif body.get("bookingId") is not None or body.get("id") is not None:
                # Acknowledgement shape: {"status": {"status": "success"}, "bookingId": N}
                booking_id = body.get("bookingId")
                data = {**submitted, "bookingId": booking_id if booking_id is not None else body["id"]}
        return self._parse(Booking, data, "booking")


def _rejection_message(response: httpx.Response) -> str:
    try:
        message = _error_message(response.json())
    except ValueError:
        message = None
        if response.headers.get("content-type", "").startswith("text/plain"):
            message = response.text.strip() or None
    return message or f"Booking was rejected (HTTP {response.status_code})"


def _error_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for candidate in (body.get("message"), body.get("detail")):
        if isinstance(candidate, str) and candidate:
            return candidate
    for key in ("error", "status"):
        nested = body.get(key)
        if isinstance(nested, dict) and isinstance(nested.get("message"), str):
            return nested["message"]
        if isinstance(nested, str) and nested and key == "error":
            return nested
    return None
