from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import httpx

from src.core.errors import BookingConflictError
from src.core.supabase import SupabaseClient
from src.models.bookings import CANCELLED_STATUS, BookingRecord


BOOKINGS_TABLE = "bookings"


class BookingsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_bookings(
        self,
        property_id: Optional[str],
        status: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        page: int,
        page_size: int,
        include_count: bool = True,
    ) -> Tuple[List[BookingRecord], int]:
        filters: List[Tuple[str, str]] = []
        if property_id:
            filters.append(("property_id", f"eq.{property_id}"))
        if status:
            filters.append(("status", f"eq.{status}"))
        if start_date:
            filters.append(("check_out", f"gte.{start_date.isoformat()}"))
        if end_date:
            filters.append(("check_in", f"lte.{end_date.isoformat()}"))

        offset = (page - 1) * page_size
        rows, total = self.client.select(
            table=BOOKINGS_TABLE,
            select="*",
            filters=filters,
            limit=page_size,
            offset=offset,
            order="check_in.desc",
            count=include_count,
        )
        records = [BookingRecord.model_validate(row) for row in rows]
        if include_count:
            return records, total or 0
        return records, 0

    def list_bookings_in_range(
        self, property_id: str, start_date: date, end_date: date
    ) -> List[BookingRecord]:
        """Non-cancelled bookings of one property touching ``[start_date, end_date]``."""
        rows, _ = self.client.select(
            table=BOOKINGS_TABLE,
            select="*",
            filters=[
                ("property_id", f"eq.{property_id}"),
                ("status", f"neq.{CANCELLED_STATUS}"),
                ("check_out", f"gte.{start_date.isoformat()}"),
                ("check_in", f"lte.{end_date.isoformat()}"),
            ],
            order="check_in.asc",
        )
        return [BookingRecord.model_validate(row) for row in rows]

    def list_active_bookings(self, from_date: date) -> List[BookingRecord]:
        rows, _ = self.client.select(
            table=BOOKINGS_TABLE,
            select="*",
            filters=[
                ("status", f"neq.{CANCELLED_STATUS}"),
                ("check_out", f"gte.{from_date.isoformat()}"),
            ],
            order="check_out.asc",
        )
        return [BookingRecord.model_validate(row) for row in rows]

    def get_booking_by_id(self, booking_id: str) -> Optional[BookingRecord]:
        rows, _ = self.client.select(
            table=BOOKINGS_TABLE,
            select="*",
            filters=[("id", f"eq.{booking_id}")],
            limit=1,
        )
        if not rows:
            return None
        return BookingRecord.model_validate(rows[0])

    def create_booking(self, payload: Dict[str, Any]) -> BookingRecord:
        try:
            rows = self.client.insert(table=BOOKINGS_TABLE, payload=payload)
        except httpx.HTTPStatusError as exc:
            _raise_on_conflict(exc)
            raise
        if not rows:
            raise RuntimeError("Supabase returned no row for the created booking")
        return BookingRecord.model_validate(rows[0])

    def update_booking(self, booking_id: str, payload: Dict[str, Any]) -> Optional[BookingRecord]:
        try:
            rows = self.client.update(
                table=BOOKINGS_TABLE,
                payload=payload,
                filters=[("id", f"eq.{booking_id}")],
            )
        except httpx.HTTPStatusError as exc:
            _raise_on_conflict(exc)
            raise
        if not rows:
            return None
        return BookingRecord.model_validate(rows[0])


def _raise_on_conflict(exc: httpx.HTTPStatusError) -> None:
    # 409 comes from the bookings_no_overlap exclusion constraint (or a duplicate booking_id).
    if exc.response.status_code != 409:
        return
    message = ""
    if "application/json" in exc.response.headers.get("content-type", ""):
        body = exc.response.json()
        if isinstance(body, dict):
            message = body.get("message") or ""
    raise BookingConflictError(
        message or "Property is already booked for some of the selected dates",
        conflicting_booking_ids=[],
    ) from exc
