from __future__ import annotations

from app.application.exceptions import BookingNotFoundError
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import ReconciledStatus


class GetBookingStatusUseCase:
    def __init__(self, store: BookingStorePort) -> None:
        self._store = store

    def execute(self, booking_id: str) -> tuple[Booking, ReconciledStatus]:
        booking = self._store.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking, booking.reconciled()
