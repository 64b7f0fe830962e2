from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import CombinedStatus


class CompletedBookingsReportUseCase:
    def __init__(self, store: BookingStorePort, timezone: ZoneInfo) -> None:
        self._store = store
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def execute(self, day: date) -> list[Booking]:
        completed = [
            booking
            for booking in self._store.list_all()
            if booking.combined_status is CombinedStatus.COMPLETED and self._local_date(booking.date) == day
        ]
        completed.sort(key=lambda b: self._local_datetime(b.date))
        self._logger.info("Completed bookings report", extra={"day": day.isoformat(), "count": len(completed)})
        return completed

    def _local_datetime(self, value: datetime) -> datetime:
        # Naive datetimes are taken to be in the business timezone.
        if value.tzinfo is None:
            return value.replace(tzinfo=self._timezone)
        return value.astimezone(self._timezone)

    def _local_date(self, value: datetime) -> date:
        return self._local_datetime(value).date()
