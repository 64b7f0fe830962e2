from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import Side, SideStatus

FILTERABLE_FIELDS = ("user_id", "therapist_id", "store_id")


class BookingStorePort(ABC):
    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_by(self, field: str, value: str) -> list[Booking]:
        """Equality-filtered read on one of FILTERABLE_FIELDS."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def update_side_status(
        self,
        booking_id: str,
        side: Side,
        expected: SideStatus | None,
        new: SideStatus,
    ) -> Booking:
        """
        Write a single status column, only if it still holds `expected`.
        Raises BookingNotFoundError when the row is missing and
        StatusConflictError when the column changed since it was read.
        """
        raise NotImplementedError
