"""
Contract of the rusunawa backend as seen by the booking core.

Implementations perform I/O; everything that consumes them evaluates the
returned snapshots synchronously.
"""

from datetime import date
from typing import List, Protocol, runtime_checkable

from rusunawa.schemas.booking import Booking, BookingCreate
from rusunawa.schemas.document import Document
from rusunawa.schemas.room import RentalType, RoomAvailabilityDay
from rusunawa.schemas.tenant import TenantProfile


@runtime_checkable
class BookingBackend(Protocol):
    """Read and write operations the booking flow needs from the backend."""

    async def get_tenant_documents(self, tenant_id: int) -> List[Document]:
        ...

    async def get_tenant_bookings(self, tenant_id: int) -> List[Booking]:
        ...

    async def get_room_availability(
        self, room_id: int, start_date: date, end_date: date
    ) -> List[RoomAvailabilityDay]:
        ...

    async def get_rental_types(self) -> List[RentalType]:
        ...

    async def get_tenant_profile(self, tenant_id: int) -> TenantProfile:
        ...

    async def create_booking(self, payload: BookingCreate) -> Booking:
        ...
