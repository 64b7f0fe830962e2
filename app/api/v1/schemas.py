from __future__ import annotations

from datetime import date as date_type, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.actor import Actor
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import CombinedStatus, PendingHint, SideStatus
from app.domain.services.status_presentation import (
    can_check_in,
    can_client_cancel,
    hint_label,
    status_label,
)


class ReconcileRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    # Raw values on purpose: anything unrecognised reconciles as pending.
    therapist_status: Any = Field(default=None, alias="therapistStatus")
    store_status: Any = Field(default=None, alias="storeStatus")


class ReconcileResponseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    combined_status: CombinedStatus = Field(alias="combinedStatus")
    hint: PendingHint | None = None


class BookingCreateSchema(BaseModel):
    therapist_id: str
    user_id: str
    date: datetime
    store_id: str | None = None
    service_id: str | None = None
    price: int = Field(default=0, ge=0)
    location: str = ""
    notes: str = ""


class SideStatusUpdateSchema(BaseModel):
    actor: Actor
    status: SideStatus


class BookingSchema(BaseModel):
    id: str
    therapist_id: str
    user_id: str | None = None
    store_id: str | None = None
    service_id: str | None = None
    date: datetime
    price: int
    location: str
    notes: str
    therapist_status: SideStatus
    store_status: SideStatus | None = None
    combined_status: CombinedStatus
    hint: PendingHint | None = None
    status_label: str
    hint_label: str | None = None
    can_cancel: bool
    can_check_in: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        reconciled = booking.reconciled()
        return cls(
            id=booking.id,
            therapist_id=booking.therapist_id,
            user_id=booking.user_id,
            store_id=booking.store_id,
            service_id=booking.service_id,
            date=booking.date,
            price=booking.price,
            location=booking.location,
            notes=booking.notes,
            therapist_status=booking.therapist_status,
            store_status=booking.store_status,
            combined_status=reconciled.combined_status,
            hint=reconciled.hint,
            status_label=status_label(reconciled.combined_status),
            hint_label=hint_label(reconciled.hint),
            can_cancel=can_client_cancel(reconciled.combined_status),
            can_check_in=can_check_in(reconciled.combined_status),
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class BookingListResponseSchema(BaseModel):
    pending: list[BookingSchema] = Field(default_factory=list)
    confirmed: list[BookingSchema] = Field(default_factory=list)
    completed: list[BookingSchema] = Field(default_factory=list)
    cancelled: list[BookingSchema] = Field(default_factory=list)
    total: int = 0


class CompletedReportSchema(BaseModel):
    day: date_type
    count: int
    bookings: list[BookingSchema] = Field(default_factory=list)
