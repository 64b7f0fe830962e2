from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.application.dto.booking_row import (
    BOOKINGS_TABLE_COLUMNS,
    STATUS_COLUMNS,
    booking_to_row,
    row_to_booking,
)
from app.application.exceptions import BookingNotFoundError, BookingStoreError, StatusConflictError
from app.application.ports.booking_store import BookingStorePort
from app.core.config import settings
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import Side, SideStatus

# The bookings table has no store_id column to filter on.
TABLE_FILTERABLE_FIELDS = ("user_id", "therapist_id")


class SupabaseBookingStore(BookingStorePort):
    """Bookings table over the Supabase REST (PostgREST) API."""

    def __init__(
        self,
        base_url: str | None = None,
        service_key: str | None = None,
        table: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self._service_key = service_key or settings.SUPABASE_SERVICE_KEY
        self._table = table or settings.SUPABASE_BOOKINGS_TABLE
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("SUPABASE_URL is required for the Supabase booking store")
        if not self._service_key:
            raise ValueError("SUPABASE_SERVICE_KEY is required for the Supabase booking store")

        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._headers = {
            "apikey": self._service_key,
            "Authorization": f"Bearer {self._service_key}",
            "Content-Type": "application/json",
        }

    @property
    def _url(self) -> str:
        return f"{self._base_url}/rest/v1/{self._table}"

    def _request(
        self,
        method: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        headers = dict(self._headers)
        if prefer:
            headers["Prefer"] = prefer
        try:
            response = self._client.request(method, self._url, params=params, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Supabase request failed",
                extra={"status": e.response.status_code, "error": e.response.text},
            )
            raise BookingStoreError(f"Supabase returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            self._logger.error("Supabase request error", extra={"error": str(e)})
            raise BookingStoreError(str(e)) from e

        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    def _to_bookings(self, rows: list[dict[str, Any]]) -> list[Booking]:
        try:
            return [row_to_booking(row) for row in rows]
        except ValidationError as e:
            raise BookingStoreError(f"Malformed booking row: {e}") from e

    def create(self, booking: Booking) -> Booking:
        rows = self._request(
            "POST",
            json=booking_to_row(booking, BOOKINGS_TABLE_COLUMNS),
            prefer="return=representation",
        )
        created = self._to_bookings(rows)
        return created[0] if created else booking

    def get(self, booking_id: str) -> Booking | None:
        rows = self._request("GET", params={"select": "*", "id": f"eq.{booking_id}"})
        bookings = self._to_bookings(rows)
        return bookings[0] if bookings else None

    def list_by(self, field: str, value: str) -> list[Booking]:
        if field not in TABLE_FILTERABLE_FIELDS:
            raise ValueError(f"Cannot filter bookings by {field!r}")
        rows = self._request("GET", params={"select": "*", field: f"eq.{value}"})
        return self._to_bookings(rows)

    def list_all(self) -> list[Booking]:
        return self._to_bookings(self._request("GET", params={"select": "*"}))

    def update_side_status(
        self,
        booking_id: str,
        side: Side,
        expected: SideStatus | None,
        new: SideStatus,
    ) -> Booking:
        column = STATUS_COLUMNS[side]
        params = {"id": f"eq.{booking_id}"}
        if expected is None or expected is SideStatus.PENDING:
            # Null columns read back as pending.
            params["or"] = f'("{column}".is.null,"{column}".eq.{SideStatus.PENDING.value})'
        else:
            params[column] = f"eq.{expected.value}"

        rows = self._request(
            "PATCH",
            params=params,
            json={column: new.value},
            prefer="return=representation",
        )
        updated = self._to_bookings(rows)
        if updated:
            return updated[0]

        # Nothing matched: either the row is gone or the column moved on.
        if self.get(booking_id) is None:
            raise BookingNotFoundError(booking_id)
        self._logger.warning(
            "Status compare-and-set missed",
            extra={"booking_id": booking_id, "side": side.value, "status": new.value},
        )
        raise StatusConflictError(f"{side.value} status of {booking_id} changed")
