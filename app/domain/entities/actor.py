from __future__ import annotations

from enum import Enum

from app.domain.entities.booking_status import Side


class Actor(str, Enum):
    THERAPIST = "therapist"
    STORE = "store"
    CLIENT = "client"

    @property
    def side(self) -> Side | None:
        """The status column this actor owns; clients own none."""
        if self is Actor.THERAPIST:
            return Side.THERAPIST
        if self is Actor.STORE:
            return Side.STORE
        return None
