from __future__ import annotations

from app.domain.entities.booking_status import SideStatus

# Each side is its own small machine; completed and cancelled are terminal.
SIDE_TRANSITIONS: dict[SideStatus, frozenset[SideStatus]] = {
    SideStatus.PENDING: frozenset({SideStatus.CONFIRMED, SideStatus.CANCELLED}),
    SideStatus.CONFIRMED: frozenset({SideStatus.COMPLETED, SideStatus.CANCELLED}),
    SideStatus.COMPLETED: frozenset(),
    SideStatus.CANCELLED: frozenset(),
}


def allowed_transitions(current: SideStatus) -> frozenset[SideStatus]:
    return SIDE_TRANSITIONS[current]


def can_transition(current: SideStatus, target: SideStatus) -> bool:
    """Re-setting the current status counts as allowed (no-op)."""
    return target == current or target in SIDE_TRANSITIONS[current]


def is_terminal(status: SideStatus) -> bool:
    return not SIDE_TRANSITIONS[status]
