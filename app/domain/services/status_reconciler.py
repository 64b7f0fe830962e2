"""
Combines the therapist-side and store-side booking statuses into the single
status shown to users and used to gate check-in, cancellation and client
notifications.

Both functions are pure: no I/O, no shared state, safe to call from anywhere.
"""

from __future__ import annotations

from typing import Any

from app.domain.entities.booking_status import (
    BookingStatusPair,
    CombinedStatus,
    PendingHint,
    ReconciledStatus,
    SideStatus,
    normalize_status,
)

_REACHED_CONFIRMATION = frozenset({SideStatus.CONFIRMED, SideStatus.COMPLETED})

_HINTS: dict[tuple[SideStatus, SideStatus], PendingHint] = {
    (SideStatus.PENDING, SideStatus.CONFIRMED): PendingHint.NEEDS_THERAPIST,
    (SideStatus.CONFIRMED, SideStatus.PENDING): PendingHint.NEEDS_STORE,
    (SideStatus.PENDING, SideStatus.PENDING): PendingHint.NEEDS_BOTH,
}


def combine(therapist_status: Any, store_status: Any) -> CombinedStatus:
    """
    Resolve the combined status. Rule order matters:
    cancelled beats everything, then mutual confirmation, then completion
    (which needs both sides to have at least confirmed), else pending.
    """
    therapist = normalize_status(therapist_status)
    store = normalize_status(store_status)

    if SideStatus.CANCELLED in (therapist, store):
        return CombinedStatus.CANCELLED
    if therapist is SideStatus.CONFIRMED and store is SideStatus.CONFIRMED:
        return CombinedStatus.CONFIRMED
    if (
        SideStatus.COMPLETED in (therapist, store)
        and therapist in _REACHED_CONFIRMATION
        and store in _REACHED_CONFIRMATION
    ):
        return CombinedStatus.COMPLETED
    return CombinedStatus.PENDING


def pending_party_hint(therapist_status: Any, store_status: Any) -> PendingHint | None:
    """Which party still has to approve. Advisory only."""
    return _HINTS.get((normalize_status(therapist_status), normalize_status(store_status)))


def reconcile(pair: BookingStatusPair) -> ReconciledStatus:
    return ReconciledStatus(
        combined_status=combine(pair.therapist_status, pair.store_status),
        hint=pending_party_hint(pair.therapist_status, pair.store_status),
    )
