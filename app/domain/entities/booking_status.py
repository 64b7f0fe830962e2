from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SideStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CombinedStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PendingHint(str, Enum):
    NEEDS_THERAPIST = "needs-therapist"
    NEEDS_STORE = "needs-store"
    NEEDS_BOTH = "needs-both"


class Side(str, Enum):
    THERAPIST = "therapist"
    STORE = "store"


_BY_VALUE = {status.value: status for status in SideStatus}


def normalize_status(value: Any) -> SideStatus:
    """
    Map a raw status value read from storage onto SideStatus.
    None, blanks, unknown strings and non-strings all become PENDING.
    """
    if isinstance(value, SideStatus):
        return value
    if not isinstance(value, str):
        return SideStatus.PENDING
    return _BY_VALUE.get(value.strip().lower(), SideStatus.PENDING)


@dataclass(frozen=True)
class BookingStatusPair:
    id: str
    therapist_status: SideStatus | None = None
    store_status: SideStatus | None = None


@dataclass(frozen=True)
class ReconciledStatus:
    combined_status: CombinedStatus
    hint: PendingHint | None = None
