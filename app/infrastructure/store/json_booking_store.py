from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.application.dto.booking_row import STATUS_COLUMNS, booking_to_row, row_to_booking
from app.application.exceptions import BookingNotFoundError, StatusConflictError
from app.application.ports.booking_store import FILTERABLE_FIELDS, BookingStorePort
from app.domain.entities.booking import Booking
from app.domain.entities.booking_status import Side, SideStatus, normalize_status


class JsonBookingStore(BookingStorePort):
    """One JSON file per booking, stored in the same row shape as the backend table."""

    def __init__(self, data_dir: str = "./data/bookings") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards _locks
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, booking_id: str) -> threading.Lock:
        with self._lock_lock:
            if booking_id not in self._locks:
                self._locks[booking_id] = threading.Lock()
            return self._locks[booking_id]

    def _get_file_path(self, booking_id: str) -> Path:
        return self._data_dir / f"{booking_id}.json"

    def _load_row(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.warning("Unreadable booking file", extra={"path": str(path), "error": str(e)})
            return None

    def _load_booking(self, path: Path) -> Booking | None:
        row = self._load_row(path)
        if row is None:
            return None
        try:
            return row_to_booking(row)
        except ValidationError as e:
            self._logger.warning("Malformed booking row", extra={"path": str(path), "error": str(e)})
            return None

    def _save_row(self, booking_id: str, row: dict[str, Any]) -> None:
        """Write to a temp file, then rename over the target."""
        file_path = self._get_file_path(booking_id)
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(row, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def create(self, booking: Booking) -> Booking:
        with self._get_lock(booking.id):
            self._save_row(booking.id, booking_to_row(booking))
        return booking

    def get(self, booking_id: str) -> Booking | None:
        return self._load_booking(self._get_file_path(booking_id))

    def list_by(self, field: str, value: str) -> list[Booking]:
        if field not in FILTERABLE_FIELDS:
            raise ValueError(f"Cannot filter bookings by {field!r}")
        return [b for b in self.list_all() if getattr(b, field) == value]

    def list_all(self) -> list[Booking]:
        bookings: list[Booking] = []
        for path in sorted(self._data_dir.glob("*.json")):
            booking = self._load_booking(path)
            if booking is not None:
                bookings.append(booking)
        return bookings

    def update_side_status(
        self,
        booking_id: str,
        side: Side,
        expected: SideStatus | None,
        new: SideStatus,
    ) -> Booking:
        column = STATUS_COLUMNS[side]
        with self._get_lock(booking_id):
            row = self._load_row(self._get_file_path(booking_id))
            if row is None:
                raise BookingNotFoundError(booking_id)
            if normalize_status(row.get(column)) is not normalize_status(expected):
                raise StatusConflictError(f"{side.value} status of {booking_id} changed")

            # Only the one column (plus updated_at) is touched.
            row[column] = new.value
            row["updated_at"] = datetime.now(timezone.utc).isoformat()
            self._save_row(booking_id, row)
        return row_to_booking(row)
