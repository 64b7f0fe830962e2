from __future__ import annotations

from app.domain.entities.booking_status import CombinedStatus, PendingHint

COMBINED_STATUS_LABELS: dict[CombinedStatus, str] = {
    CombinedStatus.PENDING: "承認待ち",
    CombinedStatus.CONFIRMED: "確定",
    CombinedStatus.COMPLETED: "完了",
    CombinedStatus.CANCELLED: "キャンセル",
}

HINT_LABELS: dict[PendingHint, str] = {
    PendingHint.NEEDS_THERAPIST: "セラピスト承認待ち",
    PendingHint.NEEDS_STORE: "店舗承認待ち",
    PendingHint.NEEDS_BOTH: "双方承認待ち",
}


def status_label(status: CombinedStatus) -> str:
    return COMBINED_STATUS_LABELS[status]


def hint_label(hint: PendingHint | None) -> str | None:
    if hint is None:
        return None
    return HINT_LABELS[hint]


def can_client_cancel(status: CombinedStatus) -> bool:
    """Clients may withdraw a request only while it is still awaiting approval."""
    return status is CombinedStatus.PENDING


def can_check_in(status: CombinedStatus) -> bool:
    return status is CombinedStatus.CONFIRMED


def should_notify_client(before: CombinedStatus, after: CombinedStatus) -> bool:
    return before is not after
