from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import Side, SideStatus, normalize_status

THERAPIST_STATUS_COLUMN = "status therapist"
STORE_STATUS_COLUMN = "status store"

STATUS_COLUMNS: dict[Side, str] = {
    Side.THERAPIST: THERAPIST_STATUS_COLUMN,
    Side.STORE: STORE_STATUS_COLUMN,
}

# Columns of the backend `bookings` table. store_id and updated_at are not among them.
BOOKINGS_TABLE_COLUMNS = frozenset(
    {
        "id",
        "therapist_id",
        "user_id",
        "service_id",
        "date",
        "price",
        "location",
        "notes",
        THERAPIST_STATUS_COLUMN,
        STORE_STATUS_COLUMN,
        "created_at",
    }
)


class BookingRowDTO(BaseModel):
    """
    A row of the `bookings` table as the backend returns it.

    A row that carries the store status column is store-mediated even when
    that column is null; only a row with neither the column nor a store_id
    is treated as a direct client-therapist booking.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    therapist_id: str
    user_id: str | None = None
    store_id: str | None = None
    service_id: str | None = None
    date: datetime
    price: int | None = None
    location: str | None = None
    notes: str | None = None
    therapist_status: Any = Field(default=None, alias=THERAPIST_STATUS_COLUMN)
    store_status: Any = Field(default=None, alias=STORE_STATUS_COLUMN)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", "therapist_id", "user_id", "store_id", "service_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)

    @property
    def has_store_side(self) -> bool:
        return "store_status" in self.model_fields_set or self.store_id is not None

    def to_entity(self) -> Booking:
        store_status: SideStatus | None = None
        if self.has_store_side:
            store_status = normalize_status(self.store_status)
        return Booking(
            id=self.id,
            therapist_id=self.therapist_id,
            user_id=self.user_id,
            store_id=self.store_id,
            service_id=self.service_id,
            date=self.date,
            price=self.price or 0,
            location=self.location or "",
            notes=self.notes or "",
            therapist_status=normalize_status(self.therapist_status),
            store_status=store_status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


def booking_to_row(booking: Booking, columns: frozenset[str] | None = None) -> dict[str, Any]:
    """Serialize a booking; `columns` limits the row to what the target table has."""
    row: dict[str, Any] = {
        "id": booking.id,
        "therapist_id": booking.therapist_id,
        "user_id": booking.user_id,
        "store_id": booking.store_id,
        "service_id": booking.service_id,
        "date": booking.date.isoformat(),
        "price": booking.price,
        "location": booking.location,
        "notes": booking.notes,
        THERAPIST_STATUS_COLUMN: booking.therapist_status.value,
        "created_at": booking.created_at.isoformat() if booking.created_at else None,
        "updated_at": booking.updated_at.isoformat() if booking.updated_at else None,
    }
    if booking.is_store_mediated:
        row[STORE_STATUS_COLUMN] = booking.store_status.value if booking.store_status else None
    if columns is None:
        return row
    return {key: value for key, value in row.items() if key in columns}


def row_to_booking(row: dict[str, Any]) -> Booking:
    return BookingRowDTO.model_validate(row).to_entity()
