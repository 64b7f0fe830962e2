from __future__ import annotations

import pytest

from app.application.ports.notifier import NotifierPort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import CombinedStatus


class RecordingNotifier(NotifierPort):
    def __init__(self) -> None:
        self.sent: list[tuple[str, CombinedStatus, CombinedStatus]] = []

    def booking_status_changed(self, booking: Booking, before: CombinedStatus, after: CombinedStatus) -> None:
        self.sent.append((booking.id, before, after))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
