from __future__ import annotations

import logging

from app.application.exceptions import (
    BookingNotFoundError,
    InvalidTransitionError,
    StatusConflictError,
)
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.notifier import NotifierPort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import CombinedStatus, Side, SideStatus, normalize_status
from app.domain.services.status_presentation import can_client_cancel


class CancelBookingRequestUseCase:
    def __init__(self, store: BookingStorePort, notifier: NotifierPort) -> None:
        self._store = store
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    def execute(self, booking_id: str) -> Booking:
        """
        Client withdraws a request. Only allowed while the combined status is
        pending; every side present on the booking is set to cancelled.
        """
        booking = self._store.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)

        before = booking.combined_status
        if not can_client_cancel(before):
            raise InvalidTransitionError(
                f"booking {booking_id} is {before.value} and can no longer be cancelled by the client"
            )

        sides = [Side.THERAPIST]
        if booking.is_store_mediated:
            sides.append(Side.STORE)

        updated = booking
        for side in sides:
            updated = self._cancel_side(updated, side)

        after = updated.combined_status
        self._logger.info(
            "Booking request cancelled by client",
            extra={"booking_id": booking_id, "combined": after.value},
        )
        self._notifier.booking_status_changed(updated, before, after)
        return updated

    def _cancel_side(self, booking: Booking, side: Side) -> Booking:
        current = normalize_status(booking.side_status(side))
        if current is SideStatus.CANCELLED:
            return booking
        try:
            return self._store.update_side_status(booking.id, side, current, SideStatus.CANCELLED)
        except StatusConflictError:
            # One retry against the fresh value; a second conflict propagates.
            fresh = self._store.get(booking.id)
            if fresh is None:
                raise BookingNotFoundError(booking.id)
            current = normalize_status(fresh.side_status(side))
            if current is SideStatus.CANCELLED:
                return fresh
            # Already cancelled (possibly by our own earlier write) is fine; confirmed or completed is not.
            fresh_combined = fresh.combined_status
            if fresh_combined is not CombinedStatus.CANCELLED and not can_client_cancel(fresh_combined):
                raise InvalidTransitionError(
                    f"booking {booking.id} became {fresh_combined.value} and can no longer be cancelled by the client"
                )
            self._logger.warning(
                "Status changed during cancel, retrying",
                extra={"booking_id": booking.id, "side": side.value, "status": current.value},
            )
            return self._store.update_side_status(booking.id, side, current, SideStatus.CANCELLED)
