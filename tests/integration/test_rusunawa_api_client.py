import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from rusunawa.core.exceptions import BackendUnavailableError, SubmissionRejectedError
from rusunawa.integrations import BookingBackend, RusunawaApiClient
from rusunawa.schemas.booking import BookingCreate
from rusunawa.schemas.common.enums import BookingStatus, DocumentStatus, WizardStep
from rusunawa.services.booking import BookingWizard

BASE_URL = "http://backend.test/api"


def client_for(handler, token="secret"):
    return RusunawaApiClient(base_url=BASE_URL, token=token, transport=httpx.MockTransport(handler))


@pytest.fixture
def booking_payload():
    return BookingCreate(
        tenant_id=10,
        room_id=7,
        check_in_date=date(2025, 1, 10),
        check_out_date=date(2025, 1, 13),
        rental_type_id=1,
        total_amount=Decimal("300000"),
    )


class TestReads:

    async def test_documents_are_fetched_with_bearer_token(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"documents": [{"docTypeId": 1, "status": "APPROVED", "docId": 3}]})

        async with client_for(handler) as client:
            documents = await client.get_tenant_documents(10)

        assert seen == {"path": "/api/v1/tenants/10/documents", "auth": "Bearer secret"}
        assert documents[0].doc_type_id == 1
        assert documents[0].status is DocumentStatus.APPROVED
        assert documents[0].document_id == 3

    async def test_bookings_without_owner_are_attributed_to_tenant(self):
        def handler(request):
            return httpx.Response(200, json={"bookings": [{
                "bookingId": 4,
                "roomId": 9,
                "roomName": "B-202",
                "checkInDate": "2025-03-01T00:00:00Z",
                "checkOutDate": "2025-04-01",
                "status": "Approved",
            }]})

        async with client_for(handler) as client:
            bookings = await client.get_tenant_bookings(10)

        assert bookings[0].tenant_id == 10
        assert bookings[0].check_in_date == date(2025, 3, 1)
        assert bookings[0].status is BookingStatus.APPROVED

    async def test_availability_sends_range_and_reads_rows(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"availability": [
                {"date": "2025-01-11", "isAvailable": False},
                {"date": "2025-01-12", "isAvailable": True},
            ]})

        async with client_for(handler) as client:
            rows = await client.get_room_availability(7, date(2025, 1, 10), date(2025, 1, 13))

        assert seen == {"startDate": "2025-01-10", "endDate": "2025-01-13"}
        assert [(r.date, r.is_available) for r in rows] == [(date(2025, 1, 11), False), (date(2025, 1, 12), True)]

    async def test_missing_availability_calendar_means_no_blackouts(self):
        async with client_for(lambda request: httpx.Response(404)) as client:
            rows = await client.get_room_availability(7, date(2025, 1, 10), date(2025, 1, 13))

        assert rows == []

    async def test_rental_types_accept_bare_list(self):
        def handler(request):
            return httpx.Response(200, json=[{"rentalTypeId": 1, "name": "Harian"}, {"rentalTypeId": 2, "name": "bulanan"}])

        async with client_for(handler) as client:
            rental_types = await client.get_rental_types()

        assert [rt.is_daily for rt in rental_types] == [True, False]

    async def test_tenant_profile_unwraps_envelope(self):
        def handler(request):
            return httpx.Response(200, json={"tenant": {"tenantId": 10, "tenantType": {"typeId": 1, "name": "mahasiswa"}}})

        async with client_for(handler) as client:
            tenant = await client.get_tenant_profile(10)

        assert tenant.is_student

    async def test_transport_error_is_backend_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with client_for(handler) as client:
            with pytest.raises(BackendUnavailableError):
                await client.get_tenant_bookings(10)

    async def test_server_error_is_backend_unavailable(self):
        async with client_for(lambda request: httpx.Response(500, json={"message": "boom"})) as client:
            with pytest.raises(BackendUnavailableError) as exc_info:
                await client.get_tenant_documents(10)

        assert exc_info.value.details["status_code"] == 500

    async def test_malformed_payload_is_backend_unavailable(self):
        def handler(request):
            return httpx.Response(200, json={"bookings": [{"bookingId": 1, "status": "approved"}]})

        async with client_for(handler) as client:
            with pytest.raises(BackendUnavailableError):
                await client.get_tenant_bookings(10)

    @pytest.mark.parametrize("status", ["checked_out", "expired"])
    async def test_finished_stays_parse_as_inactive(self, status):
        def handler(request):
            return httpx.Response(200, json={"bookings": [{
                "bookingId": 2,
                "roomId": 9,
                "checkInDate": "2024-01-01",
                "checkOutDate": "2024-02-01",
                "status": status,
            }]})

        async with client_for(handler) as client:
            bookings = await client.get_tenant_bookings(10)

        assert bookings[0].status is BookingStatus(status)
        assert bookings[0].is_active is False

    def test_client_satisfies_backend_protocol(self):
        assert isinstance(client_for(lambda request: httpx.Response(200)), BookingBackend)


class TestCreateBooking:

    async def test_created_booking_is_returned(self, booking_payload):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"booking": {
                "bookingId": 77,
                "checkInDate": "2025-01-10",
                "checkOutDate": "2025-01-13",
                "status": "pending",
            }})

        async with client_for(handler) as client:
            booking = await client.create_booking(booking_payload)

        assert seen["method"] == "POST"
        assert seen["body"] == {
            "tenantId": 10,
            "roomId": 7,
            "checkInDate": "2025-01-10",
            "checkOutDate": "2025-01-13",
            "rentalTypeId": 1,
            "totalAmount": 300000.0,
        }
        assert booking.booking_id == 77
        assert booking.room_id == 7
        assert booking.total_amount == Decimal("300000.00")

    async def test_rejection_message_is_kept_verbatim(self, booking_payload):
        def handler(request):
            return httpx.Response(409, json={"message": "Room is already booked for the selected dates"})

        async with client_for(handler) as client:
            with pytest.raises(SubmissionRejectedError) as exc_info:
                await client.create_booking(booking_payload)

        assert exc_info.value.message == "Room is already booked for the selected dates"

    async def test_error_envelope_on_success_status_is_a_rejection(self, booking_payload):
        def handler(request):
            return httpx.Response(200, json={"status": {"status": "error", "message": "Tenant quota exceeded"}})

        async with client_for(handler) as client:
            with pytest.raises(SubmissionRejectedError, match="Tenant quota exceeded"):
                await client.create_booking(booking_payload)

    async def test_server_error_on_create_is_backend_unavailable(self, booking_payload):
        async with client_for(lambda request: httpx.Response(503)) as client:
            with pytest.raises(BackendUnavailableError):
                await client.create_booking(booking_payload)

    async def test_acknowledgement_without_booking_body(self, booking_payload):
        def handler(request):
            return httpx.Response(201, json={"status": {"status": "success"}, "bookingId": 42})

        async with client_for(handler) as client:
            booking = await client.create_booking(booking_payload)

        assert booking.booking_id == 42
        assert booking.tenant_id == 10
        assert booking.room_id == 7
        assert booking.check_in_date == date(2025, 1, 10)
        assert booking.check_out_date == date(2025, 1, 13)
        assert booking.status is BookingStatus.PENDING
        assert booking.total_amount == Decimal("300000.00")

    async def test_plain_text_rejection_is_kept_verbatim(self, booking_payload):
        def handler(request):
            return httpx.Response(409, text="Room 7 is no longer available")

        async with client_for(handler) as client:
            with pytest.raises(SubmissionRejectedError) as exc_info:
                await client.create_booking(booking_payload)

        assert exc_info.value.message == "Room 7 is no longer available"

    async def test_html_rejection_is_still_a_rejection(self, booking_payload):
        def handler(request):
            return httpx.Response(403, html="<html><body>Forbidden</body></html>")

        async with client_for(handler) as client:
            with pytest.raises(SubmissionRejectedError) as exc_info:
                await client.create_booking(booking_payload)

        assert exc_info.value.message == "Booking was rejected (HTTP 403)"
        assert exc_info.value.details == {"status_code": 403}


class TestWizardOverHttp:

    @staticmethod
    def backend_handler(created):
        def handler(request):
            path = request.url.path
            if path == "/api/v1/tenants/10/documents":
                return httpx.Response(200, json={"documents": [{"docTypeId": 1, "status": "approved"}]})
            if path == "/api/v1/tenants/10/bookings":
                return httpx.Response(200, json={"bookings": [{
                    "bookingId": 3,
                    "roomId": 9,
                    "checkInDate": "2024-01-01",
                    "checkOutDate": "2024-02-01",
                    "status": "checked_out",
                }]})
            if path == "/api/v1/rooms/7/availability":
                return httpx.Response(404)
            if path == "/api/v1/bookings" and request.method == "POST":
                created.append(json.loads(request.content))
                return httpx.Response(201, json={"status": {"status": "success"}, "bookingId": 42})
            return httpx.Response(500)
        return handler

    async def test_tenant_with_past_stay_books_and_confirms(self, non_student, daily_room, daily_type, today):
        created = []
        async with client_for(self.backend_handler(created)) as client:
            wizard = BookingWizard(client, non_student, daily_room, daily_type, today=today)
            wizard.next()
            wizard.select_dates("2025-03-01", "2025-03-05")

            validated = await wizard.validate_dates()
            assert validated.is_success, validated.error
            assert validated.data.quote.active_bookings == []
            assert wizard.next().is_success

            result = await wizard.submit()

        assert result.is_success, result.error
        assert result.data.step is WizardStep.CONFIRMATION
        assert result.data.booking.booking_id == 42
        assert result.data.booking.check_in_date == date(2025, 3, 1)
        assert created[0]["totalAmount"] == 400000.0
