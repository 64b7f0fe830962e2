from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import SideStatus


class CreateBookingUseCase:
    def __init__(self, store: BookingStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        therapist_id: str,
        user_id: str,
        date: datetime,
        store_id: str | None = None,
        service_id: str | None = None,
        price: int = 0,
        location: str = "",
        notes: str = "",
    ) -> Booking:
        """New bookings start pending on every side that has an approver."""
        now = datetime.now(timezone.utc)
        booking = Booking(
            id=str(uuid.uuid4()),
            therapist_id=therapist_id,
            user_id=user_id,
            date=date,
            store_id=store_id,
            service_id=service_id,
            price=price,
            location=location,
            notes=notes,
            therapist_status=SideStatus.PENDING,
            store_status=SideStatus.PENDING if store_id is not None else None,
            created_at=now,
            updated_at=now,
        )
        created = self._store.create(booking)
        self._logger.info("Booking created", extra={"booking_id": created.id})
        return created
