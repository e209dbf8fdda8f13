from datetime import date
from decimal import Decimal

import pytest

from rusunawa.core.exceptions import BackendUnavailableError
from rusunawa.schemas.booking import Booking
from rusunawa.schemas.document import Document, DocumentType
from rusunawa.schemas.room import RentalType, Room, RoomAvailabilityDay
from rusunawa.schemas.tenant import TenantProfile, TenantType


class FakeBackend:
    """In-memory backend. Operations listed in `fail` raise; `gates` hold a call until released."""

    def __init__(self, tenant, documents=None, bookings=None, unavailable=None, rental_types=None):
        self.tenant = tenant
        self.documents = list(documents or [])
        self.bookings = list(bookings or [])
        self.unavailable = list(unavailable or [])
        self.rental_types = list(rental_types or [])
        self.fail = set()
        self.gates = {}
        self.calls = []
        self.created = []
        self.create_error = None

    async def _enter(self, operation):
        self.calls.append(operation)
        gate = self.gates.get(operation)
        if gate is not None:
            await gate.wait()
        if operation in self.fail:
            raise BackendUnavailableError(f"{operation} failed")

    async def get_tenant_documents(self, tenant_id):
        await self._enter("documents")
        return list(self.documents)

    async def get_tenant_bookings(self, tenant_id):
        await self._enter("bookings")
        return [b for b in self.bookings if b.tenant_id == tenant_id]

    async def get_room_availability(self, room_id, start_date, end_date):
        await self._enter("availability")
        return [RoomAvailabilityDay(date=d, is_available=False) for d in self.unavailable]

    async def get_rental_types(self):
        await self._enter("rental_types")
        return list(self.rental_types)

    async def get_tenant_profile(self, tenant_id):
        await self._enter("tenant")
        return self.tenant

    async def create_booking(self, payload):
        await self._enter("create")
        if self.create_error is not None:
            raise self.create_error
        booking = Booking(
            booking_id=500 + len(self.created),
            tenant_id=payload.tenant_id,
            room_id=payload.room_id,
            check_in_date=payload.check_in_date,
            check_out_date=payload.check_out_date,
            status="pending",
            total_amount=payload.total_amount,
            rental_type_id=payload.rental_type_id,
        )
        self.created.append(payload)
        self.bookings.append(booking)
        return booking


def make_booking(booking_id=1, tenant_id=10, room_id=9, start=date(2025, 3, 1), end=date(2025, 4, 1),
                 status="approved", room_name="B-202"):
    return Booking(
        booking_id=booking_id,
        tenant_id=tenant_id,
        room_id=room_id,
        room_name=room_name,
        check_in_date=start,
        check_out_date=end,
        status=status,
    )


def approved(*doc_type_ids):
    return [Document(doc_type_id=t, status="approved") for t in doc_type_ids]


@pytest.fixture
def daily_type():
    return RentalType(rental_type_id=1, name="harian")


@pytest.fixture
def monthly_type():
    return RentalType(rental_type_id=2, name="bulanan")


@pytest.fixture
def daily_room(daily_type):
    return Room(room_id=7, name="A-101", rate=Decimal("100000"), rental_type=daily_type)


@pytest.fixture
def monthly_room(monthly_type):
    return Room(room_id=8, name="A-102", rate=Decimal("2500000"), rental_type=monthly_type)


@pytest.fixture
def student():
    return TenantProfile(tenant_id=10, name="Sari", tenant_type=TenantType(tenant_type_id=1, name="mahasiswa"))


@pytest.fixture
def non_student():
    return TenantProfile(tenant_id=10, name="Budi", tenant_type=TenantType(tenant_type_id=2, name="umum"))


@pytest.fixture
def backend(student, daily_type, monthly_type):
    return FakeBackend(
        tenant=student,
        documents=approved(DocumentType.KTP, DocumentType.AGREEMENT_LETTER, DocumentType.FAMILY_CARD),
        rental_types=[daily_type, monthly_type],
    )


@pytest.fixture
def today():
    return lambda: date(2025, 1, 1)

