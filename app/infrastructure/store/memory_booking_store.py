from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone

from app.application.exceptions import BookingNotFoundError, StatusConflictError
from app.application.ports.booking_store import FILTERABLE_FIELDS, BookingStorePort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import Side, SideStatus, normalize_status


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()

    def create(self, booking: Booking) -> Booking:
        with self._lock:
            self._bookings[booking.id] = booking
        return booking

    def get(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def list_by(self, field: str, value: str) -> list[Booking]:
        if field not in FILTERABLE_FIELDS:
            raise ValueError(f"Cannot filter bookings by {field!r}")
        return [b for b in self._bookings.values() if getattr(b, field) == value]

    def list_all(self) -> list[Booking]:
        return list(self._bookings.values())

    def update_side_status(
        self,
        booking_id: str,
        side: Side,
        expected: SideStatus | None,
        new: SideStatus,
    ) -> Booking:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                raise BookingNotFoundError(booking_id)
            if normalize_status(booking.side_status(side)) is not normalize_status(expected):
                raise StatusConflictError(f"{side.value} status of {booking_id} changed")

            field = "therapist_status" if side is Side.THERAPIST else "store_status"
            updated = replace(booking, **{field: new, "updated_at": datetime.now(timezone.utc)})
            self._bookings[booking_id] = updated
            return updated
