from abc import ABC, abstractmethod

from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import CombinedStatus


class NotifierPort(ABC):
    @abstractmethod
    def booking_status_changed(self, booking: Booking, before: CombinedStatus, after: CombinedStatus) -> None:
        raise NotImplementedError
