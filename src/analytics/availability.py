from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from src.core.errors import InvalidDateRangeError
from src.models.bookings import BookingRecord
from src.schemas.availability import (
    DayAvailability,
    MonthlyAvailability,
    OccupancyStats,
    OccupyingBooking,
    PropertyAvailabilitySummary,
    RangeAvailability,
    RangeDayAvailability,
)
from src.shared.time import iter_days, month_bounds, touches_days


logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def qualifying_bookings(
    property_id: Optional[str], bookings: Iterable[BookingRecord]
) -> List[BookingRecord]:
    """Non-cancelled, well-formed bookings of ``property_id``, earliest check-in first."""
    if not property_id:
        return []
    selected: List[BookingRecord] = []
    for booking in bookings:
        if booking.property_id != property_id or booking.is_cancelled:
            continue
        if not booking.has_valid_range:
            logger.warning(
                "Ignoring booking %s with check_in %s not before check_out %s",
                booking.id,
                booking.check_in,
                booking.check_out,
            )
            continue
        selected.append(booking)
    # sorted() is stable, so equal check-ins keep their input order.
    return sorted(selected, key=lambda booking: booking.check_in)


def _occupancy_by_day(
    bookings: Sequence[BookingRecord], start: date, end: date
) -> tuple[Dict[date, BookingRecord], List[date]]:
    """Map each day in ``[start, end]`` to its first occupant and list double-claimed days."""
    occupants: Dict[date, BookingRecord] = {}
    conflicts: List[date] = []
    for booking in bookings:
        first = max(booking.check_in, start)
        last = min(booking.check_out - timedelta(days=1), end)
        for day in iter_days(first, last):
            if day in occupants:
                if day not in conflicts:
                    conflicts.append(day)
                continue
            occupants[day] = booking
    return occupants, sorted(conflicts)


def _project(booking: BookingRecord) -> OccupyingBooking:
    return OccupyingBooking(
        id=booking.id,
        guest_name=booking.guest_name,
        check_in=booking.check_in,
        check_out=booking.check_out,
        status=booking.status,
        amount=booking.total_amount,
    )


def calculate_occupancy(
    availability: Mapping[str, DayAvailability], total_revenue: Decimal
) -> OccupancyStats:
    total_days = len(availability)
    booked_days = sum(1 for day in availability.values() if not day.available)
    occupancy_rate = (booked_days / total_days) * 100 if total_days else 0.0
    if booked_days:
        average_daily_rate = (total_revenue / booked_days).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        average_daily_rate = Decimal("0")
    return OccupancyStats(
        total_days=total_days,
        booked_days=booked_days,
        available_days=total_days - booked_days,
        occupancy_rate=round(occupancy_rate, 2),
        total_revenue=total_revenue,
        average_daily_rate=average_daily_rate,
    )


def compute_monthly_availability(
    property_id: Optional[str],
    year: int,
    month: int,
    bookings: Iterable[BookingRecord],
) -> MonthlyAvailability:
    month_start, month_end = month_bounds(year, month)
    candidates = [
        booking
        for booking in qualifying_bookings(property_id, bookings)
        if touches_days(
            booking.check_in, booking.check_out, month_start, month_end
        )
    ]
    occupants, conflicts = _occupancy_by_day(candidates, month_start, month_end)
    if conflicts:
        logger.warning(
            "Property %s has %d double-booked day(s) in %04d-%02d",
            property_id,
            len(conflicts),
            year,
            month,
        )

    availability: Dict[str, DayAvailability] = {}
    for day in iter_days(month_start, month_end):
        occupant = occupants.get(day)
        if occupant is None:
            availability[day.isoformat()] = DayAvailability(date=day, available=True)
            continue
        availability[day.isoformat()] = DayAvailability(
            date=day,
            available=False,
            booking=_project(occupant),
            revenue=occupant.total_amount,
        )

    # Each intersecting booking counts in full for every month it touches.
    total_revenue = sum((booking.total_amount for booking in candidates), Decimal("0"))

    return MonthlyAvailability(
        property_id=property_id or None,
        year=year,
        month=month,
        availability=availability,
        occupancy=calculate_occupancy(availability, total_revenue),
        bookings=[_project(booking) for booking in candidates],
        conflict_dates=conflicts,
    )


def compute_range_availability(
    property_id: Optional[str],
    start_date: date,
    end_date: date,
    bookings: Iterable[BookingRecord],
) -> RangeAvailability:
    if end_date < start_date:
        raise InvalidDateRangeError("End date must not be before start date")
    candidates = [
        booking
        for booking in qualifying_bookings(property_id, bookings)
        if touches_days(
            booking.check_in, booking.check_out, start_date, end_date
        )
    ]
    occupants, _ = _occupancy_by_day(candidates, start_date, end_date)

    availability: Dict[str, RangeDayAvailability] = {}
    for day in iter_days(start_date, end_date):
        occupant = occupants.get(day)
        if occupant is None:
            availability[day.isoformat()] = RangeDayAvailability(available=True)
        else:
            availability[day.isoformat()] = RangeDayAvailability(
                available=False, booking_id=occupant.id, status=occupant.status
            )

    return RangeAvailability(
        property_id=property_id or None,
        start_date=start_date,
        end_date=end_date,
        availability=availability,
        total_bookings=len(candidates),
    )


def summarize_properties_availability(
    bookings: Iterable[BookingRecord],
    property_names: Mapping[str, str],
    today: date,
) -> List[PropertyAvailabilitySummary]:
    grouped: Dict[str, List[BookingRecord]] = defaultdict(list)
    for booking in bookings:
        if not booking.property_id or booking.is_cancelled:
            continue
        if booking.check_out < today:
            continue
        grouped[booking.property_id].append(booking)

    summaries = [
        PropertyAvailabilitySummary(
            property_id=property_id,
            property_name=property_names.get(property_id) or f"Property {property_id}",
            active_bookings=len(property_bookings),
            next_available=max(booking.check_out for booking in property_bookings),
        )
        for property_id, property_bookings in grouped.items()
    ]
    summaries.sort(key=lambda summary: (summary.next_available, summary.property_id))
    return summaries
