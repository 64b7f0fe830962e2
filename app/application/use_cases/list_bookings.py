from __future__ import annotations

from app.application.ports.booking_store import FILTERABLE_FIELDS, BookingStorePort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import CombinedStatus


def _newest_first(booking: Booking) -> float:
    return booking.created_at.timestamp() if booking.created_at else float("-inf")


class ListBookingsUseCase:
    def __init__(self, store: BookingStorePort) -> None:
        self._store = store

    def execute(self, field: str, value: str) -> dict[CombinedStatus, list[Booking]]:
        """Bookings for one user/therapist/store, split by combined status."""
        if field not in FILTERABLE_FIELDS:
            raise ValueError(f"Cannot filter bookings by {field!r}")

        grouped: dict[CombinedStatus, list[Booking]] = {status: [] for status in CombinedStatus}
        for booking in sorted(self._store.list_by(field, value), key=_newest_first, reverse=True):
            grouped[booking.combined_status].append(booking)
        return grouped
