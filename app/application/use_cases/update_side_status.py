from __future__ import annotations

import logging

from app.application.exceptions import (
    ActorNotAllowedError,
    BookingNotFoundError,
    InvalidTransitionError,
)
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.notifier import NotifierPort
from app.domain.entities.actor import Actor
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import Side, SideStatus, normalize_status
from app.domain.services.side_transitions import allowed_transitions, can_transition, is_terminal
from app.domain.services.status_presentation import should_notify_client


class UpdateSideStatusUseCase:
    """
    Therapist or store moves its own status column.

    The current pair is read explicitly, the one column is written with a
    compare-and-set on its previous value, and the combined status is
    recomputed from what the store returned.
    """

    def __init__(self, store: BookingStorePort, notifier: NotifierPort) -> None:
        self._store = store
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    def execute(self, booking_id: str, actor: Actor, new_status: SideStatus) -> Booking:
        side = actor.side
        if side is None:
            raise ActorNotAllowedError(f"{actor.value} cannot set a side status")

        booking = self._store.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        if side is Side.STORE and not booking.is_store_mediated:
            raise ActorNotAllowedError(f"booking {booking_id} has no store")

        current = normalize_status(booking.side_status(side))
        if current is new_status:
            return booking
        if not can_transition(current, new_status):
            if is_terminal(current):
                raise InvalidTransitionError(f"{side.value} status is already {current.value} and cannot change")
            allowed = ", ".join(sorted(s.value for s in allowed_transitions(current)))
            raise InvalidTransitionError(
                f"{side.value} status cannot go from {current.value} to {new_status.value} (allowed: {allowed})"
            )

        before = booking.combined_status
        updated = self._store.update_side_status(booking_id, side, current, new_status)
        after = updated.combined_status

        self._logger.info(
            "Side status updated",
            extra={
                "booking_id": booking_id,
                "actor": actor.value,
                "side": side.value,
                "status": new_status.value,
                "combined": after.value,
            },
        )
        if should_notify_client(before, after):
            self._notifier.booking_status_changed(updated, before, after)
        return updated
