from __future__ import annotations

import logging

from app.application.ports.notifier import NotifierPort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import CombinedStatus
from app.domain.services.status_presentation import status_label


class LoggingNotifier(NotifierPort):
    """Logs client-facing status changes; delivery happens elsewhere."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def booking_status_changed(self, booking: Booking, before: CombinedStatus, after: CombinedStatus) -> None:
        self._logger.info(
            "WOULD_NOTIFY_CLIENT",
            extra={
                "booking_id": booking.id,
                "user_id": booking.user_id,
                "combined": after.value,
                "reason": f"{status_label(before)} -> {status_label(after)}",
            },
        )
