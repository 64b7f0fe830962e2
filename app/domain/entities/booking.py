from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.booking_status import (
    BookingStatusPair,
    CombinedStatus,
    PendingHint,
    ReconciledStatus,
    Side,
    SideStatus,
)
from app.domain.services.status_reconciler import reconcile


@dataclass(frozen=True)
class Booking:
    id: str
    therapist_id: str
    user_id: str | None
    date: datetime
    store_id: str | None = None
    service_id: str | None = None
    price: int = 0  # yen
    location: str = ""
    notes: str = ""
    therapist_status: SideStatus = SideStatus.PENDING
    store_status: SideStatus | None = SideStatus.PENDING  # None when no store mediates
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_store_mediated(self) -> bool:
        return self.store_id is not None or self.store_status is not None

    def side_status(self, side: Side) -> SideStatus | None:
        if side is Side.THERAPIST:
            return self.therapist_status
        return self.store_status

    def status_pair(self) -> BookingStatusPair:
        # No store means nobody left to approve on that side.
        store_status = self.store_status if self.is_store_mediated else SideStatus.CONFIRMED
        return BookingStatusPair(
            id=self.id,
            therapist_status=self.therapist_status,
            store_status=store_status,
        )

    def reconciled(self) -> ReconciledStatus:
        return reconcile(self.status_pair())

    @property
    def combined_status(self) -> CombinedStatus:
        return self.reconciled().combined_status

    @property
    def hint(self) -> PendingHint | None:
        return self.reconciled().hint
