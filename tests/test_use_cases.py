from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.application.exceptions import (
    ActorNotAllowedError,
    BookingNotFoundError,
    InvalidTransitionError,
    StatusConflictError,
)
from app.application.use_cases.cancel_booking_request import CancelBookingRequestUseCase
from app.application.use_cases.completed_report import CompletedBookingsReportUseCase
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.application.use_cases.get_booking_status import GetBookingStatusUseCase
from app.application.use_cases.list_bookings import ListBookingsUseCase
from app.application.use_cases.update_side_status import UpdateSideStatusUseCase
from app.domain.entities.actor import Actor
from app.domain.entities.booking_status import CombinedStatus, PendingHint, Side, SideStatus
from app.infrastructure.notify.logging_notifier import LoggingNotifier
from app.infrastructure.store.memory_booking_store import MemoryBookingStore


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


def _create(store, store_id: str | None = "s1", user_id: str = "u1", when: datetime | None = None):
    return CreateBookingUseCase(store).execute(
        therapist_id="t1",
        user_id=user_id,
        date=when or datetime(2026, 10, 20, 15, 0, tzinfo=ZoneInfo("Asia/Tokyo")),
        store_id=store_id,
        price=12000,
        location="ホテル",
    )


def test_create_starts_pending(store):
    booking = _create(store)
    assert booking.therapist_status is SideStatus.PENDING
    assert booking.store_status is SideStatus.PENDING
    assert booking.combined_status is CombinedStatus.PENDING
    assert store.get(booking.id) == booking

    direct = _create(store, store_id=None)
    assert direct.store_status is None
    assert direct.hint is PendingHint.NEEDS_THERAPIST


def test_get_booking_status(store):
    booking = _create(store)
    found, reconciled = GetBookingStatusUseCase(store).execute(booking.id)
    assert found.id == booking.id
    assert reconciled.combined_status is CombinedStatus.PENDING
    assert reconciled.hint is PendingHint.NEEDS_BOTH

    with pytest.raises(BookingNotFoundError):
        GetBookingStatusUseCase(store).execute("missing")


def test_both_sides_confirm_then_complete(store, notifier):
    booking = _create(store)
    uc = UpdateSideStatusUseCase(store, notifier)

    after_therapist = uc.execute(booking.id, Actor.THERAPIST, SideStatus.CONFIRMED)
    assert after_therapist.combined_status is CombinedStatus.PENDING
    assert after_therapist.hint is PendingHint.NEEDS_STORE
    assert notifier.sent == []

    after_store = uc.execute(booking.id, Actor.STORE, SideStatus.CONFIRMED)
    assert after_store.combined_status is CombinedStatus.CONFIRMED
    assert notifier.sent == [(booking.id, CombinedStatus.PENDING, CombinedStatus.CONFIRMED)]

    done = uc.execute(booking.id, Actor.THERAPIST, SideStatus.COMPLETED)
    assert done.combined_status is CombinedStatus.COMPLETED
    assert notifier.sent[-1] == (booking.id, CombinedStatus.CONFIRMED, CombinedStatus.COMPLETED)


def test_same_status_is_a_no_op(store, notifier):
    booking = _create(store)
    result = UpdateSideStatusUseCase(store, notifier).execute(booking.id, Actor.THERAPIST, SideStatus.PENDING)
    assert result == booking
    assert notifier.sent == []


def test_invalid_transition(store, notifier):
    booking = _create(store)
    with pytest.raises(InvalidTransitionError):
        UpdateSideStatusUseCase(store, notifier).execute(booking.id, Actor.THERAPIST, SideStatus.COMPLETED)


def test_actor_separation(store, notifier):
    booking = _create(store)
    uc = UpdateSideStatusUseCase(store, notifier)
    with pytest.raises(ActorNotAllowedError):
        uc.execute(booking.id, Actor.CLIENT, SideStatus.CONFIRMED)

    direct = _create(store, store_id=None)
    with pytest.raises(ActorNotAllowedError):
        uc.execute(direct.id, Actor.STORE, SideStatus.CONFIRMED)

    with pytest.raises(BookingNotFoundError):
        uc.execute("missing", Actor.THERAPIST, SideStatus.CONFIRMED)


def test_store_cancel_dominates(store, notifier):
    booking = _create(store)
    uc = UpdateSideStatusUseCase(store, notifier)
    uc.execute(booking.id, Actor.THERAPIST, SideStatus.CONFIRMED)
    cancelled = uc.execute(booking.id, Actor.STORE, SideStatus.CANCELLED)
    assert cancelled.therapist_status is SideStatus.CONFIRMED
    assert cancelled.combined_status is CombinedStatus.CANCELLED


def test_compare_and_set_conflict(store):
    booking = _create(store)
    store.update_side_status(booking.id, Side.THERAPIST, SideStatus.PENDING, SideStatus.CONFIRMED)
    with pytest.raises(StatusConflictError):
        store.update_side_status(booking.id, Side.THERAPIST, SideStatus.PENDING, SideStatus.CANCELLED)
    # The other column is untouched by either write.
    assert store.get(booking.id).store_status is SideStatus.PENDING


def test_client_cancel_while_pending(store, notifier):
    booking = _create(store)
    UpdateSideStatusUseCase(store, notifier).execute(booking.id, Actor.THERAPIST, SideStatus.CONFIRMED)

    cancelled = CancelBookingRequestUseCase(store, notifier).execute(booking.id)
    assert cancelled.therapist_status is SideStatus.CANCELLED
    assert cancelled.store_status is SideStatus.CANCELLED
    assert cancelled.combined_status is CombinedStatus.CANCELLED
    assert notifier.sent[-1] == (booking.id, CombinedStatus.PENDING, CombinedStatus.CANCELLED)


def test_client_cancel_without_store(store, notifier):
    booking = _create(store, store_id=None)
    cancelled = CancelBookingRequestUseCase(store, notifier).execute(booking.id)
    assert cancelled.therapist_status is SideStatus.CANCELLED
    assert cancelled.store_status is None


def test_client_cannot_cancel_confirmed(store, notifier):
    booking = _create(store)
    uc = UpdateSideStatusUseCase(store, notifier)
    uc.execute(booking.id, Actor.THERAPIST, SideStatus.CONFIRMED)
    uc.execute(booking.id, Actor.STORE, SideStatus.CONFIRMED)

    with pytest.raises(InvalidTransitionError):
        CancelBookingRequestUseCase(store, notifier).execute(booking.id)


def test_list_bookings_groups_by_combined_status(store, notifier):
    first = _create(store)
    second = _create(store)
    _create(store, user_id="someone-else")
    uc = UpdateSideStatusUseCase(store, notifier)
    uc.execute(second.id, Actor.THERAPIST, SideStatus.CONFIRMED)
    uc.execute(second.id, Actor.STORE, SideStatus.CONFIRMED)

    grouped = ListBookingsUseCase(store).execute("user_id", "u1")
    assert set(grouped) == set(CombinedStatus)
    assert [b.id for b in grouped[CombinedStatus.PENDING]] == [first.id]
    assert [b.id for b in grouped[CombinedStatus.CONFIRMED]] == [second.id]
    assert grouped[CombinedStatus.COMPLETED] == []

    with pytest.raises(ValueError):
        ListBookingsUseCase(store).execute("location", "ホテル")


def test_completed_report_for_a_day(store, notifier):
    tz = ZoneInfo("Asia/Tokyo")
    uc = UpdateSideStatusUseCase(store, notifier)

    today = _create(store, when=datetime(2026, 10, 17, 10, 0, tzinfo=tz))
    # 2026-10-17 01:00 JST expressed in UTC falls on the previous UTC day.
    late = _create(store, when=datetime(2026, 10, 16, 16, 0, tzinfo=timezone.utc))
    other_day = _create(store, when=datetime(2026, 10, 18, 10, 0, tzinfo=tz))
    still_pending = _create(store, when=datetime(2026, 10, 17, 12, 0, tzinfo=tz))

    for booking in (today, late, other_day):
        uc.execute(booking.id, Actor.THERAPIST, SideStatus.CONFIRMED)
        uc.execute(booking.id, Actor.STORE, SideStatus.CONFIRMED)
        uc.execute(booking.id, Actor.STORE, SideStatus.COMPLETED)
    uc.execute(still_pending.id, Actor.THERAPIST, SideStatus.CONFIRMED)

    report = CompletedBookingsReportUseCase(store, tz).execute(date(2026, 10, 17))
    assert [b.id for b in report] == [late.id, today.id]


class _ConfirmsBothBeforeCancel(MemoryBookingStore):
    """Therapist and store both confirm just before the client's first cancel write lands."""

    def __init__(self) -> None:
        super().__init__()
        self._raced = False

    def update_side_status(self, booking_id, side, expected, new):
        if new is SideStatus.CANCELLED and not self._raced:
            self._raced = True
            super().update_side_status(booking_id, Side.THERAPIST, SideStatus.PENDING, SideStatus.CONFIRMED)
            super().update_side_status(booking_id, Side.STORE, SideStatus.PENDING, SideStatus.CONFIRMED)
        return super().update_side_status(booking_id, side, expected, new)


class _TherapistConfirmsBeforeCancel(MemoryBookingStore):
    def __init__(self) -> None:
        super().__init__()
        self._raced = False

    def update_side_status(self, booking_id, side, expected, new):
        if new is SideStatus.CANCELLED and not self._raced:
            self._raced = True
            super().update_side_status(booking_id, Side.THERAPIST, SideStatus.PENDING, SideStatus.CONFIRMED)
        return super().update_side_status(booking_id, side, expected, new)


def test_client_cancel_refused_when_booking_confirmed_meanwhile(notifier):
    store = _ConfirmsBothBeforeCancel()
    booking = _create(store)

    with pytest.raises(InvalidTransitionError):
        CancelBookingRequestUseCase(store, notifier).execute(booking.id)

    current = store.get(booking.id)
    assert current.therapist_status is SideStatus.CONFIRMED
    assert current.store_status is SideStatus.CONFIRMED
    assert current.combined_status is CombinedStatus.CONFIRMED
    assert notifier.sent == []


def test_client_cancel_retries_while_still_pending(notifier):
    store = _TherapistConfirmsBeforeCancel()
    booking = _create(store)

    cancelled = CancelBookingRequestUseCase(store, notifier).execute(booking.id)

    assert cancelled.therapist_status is SideStatus.CANCELLED
    assert cancelled.store_status is SideStatus.CANCELLED
    assert notifier.sent == [(booking.id, CombinedStatus.PENDING, CombinedStatus.CANCELLED)]


def test_invalid_transition_messages(store, notifier):
    booking = _create(store)
    uc = UpdateSideStatusUseCase(store, notifier)

    with pytest.raises(InvalidTransitionError, match=r"allowed: cancelled, confirmed"):
        uc.execute(booking.id, Actor.THERAPIST, SideStatus.COMPLETED)

    uc.execute(booking.id, Actor.THERAPIST, SideStatus.CANCELLED)
    with pytest.raises(InvalidTransitionError, match="already cancelled"):
        uc.execute(booking.id, Actor.THERAPIST, SideStatus.CONFIRMED)


def test_logging_notifier_logs_status_change(store, caplog):
    booking = _create(store)
    caplog.set_level(logging.INFO, logger="app.infrastructure.notify.logging_notifier")

    LoggingNotifier().booking_status_changed(booking, CombinedStatus.PENDING, CombinedStatus.CONFIRMED)

    records = [r for r in caplog.records if r.getMessage() == "WOULD_NOTIFY_CLIENT"]
    assert len(records) == 1
    assert records[0].booking_id == booking.id
    assert records[0].combined == "confirmed"
    assert records[0].reason == "承認待ち -> 確定"
