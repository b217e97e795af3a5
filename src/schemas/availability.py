from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field

from src.shared.base import BaseSchema


class OccupyingBooking(BaseSchema):
    id: str
    guest_name: Optional[str] = None
    check_in: date
    check_out: date
    status: str
    amount: Decimal


class DayAvailability(BaseSchema):
    date: date
    available: bool
    booking: Optional[OccupyingBooking] = None
    revenue: Optional[Decimal] = None


class OccupancyStats(BaseSchema):
    total_days: int
    booked_days: int
    available_days: int
    occupancy_rate: float = Field(..., ge=0.0, le=100.0)
    total_revenue: Decimal
    average_daily_rate: Decimal


class MonthlyAvailability(BaseSchema):
    property_id: Optional[str] = None
    year: int
    month: int
    availability: Dict[str, DayAvailability]
    occupancy: OccupancyStats
    bookings: List[OccupyingBooking] = Field(default_factory=list)
    conflict_dates: List[date] = Field(default_factory=list)


class RangeDayAvailability(BaseSchema):
    available: bool
    booking_id: Optional[str] = None
    status: Optional[str] = None


class RangeAvailability(BaseSchema):
    property_id: Optional[str] = None
    start_date: date
    end_date: date
    availability: Dict[str, RangeDayAvailability]
    total_bookings: int


class PropertyAvailabilitySummary(BaseSchema):
    property_id: str
    property_name: str
    active_bookings: int
    next_available: date


class MonthlyAvailabilityFilters(BaseSchema):
    property_id: Optional[str] = None
    year: int = Field(..., ge=2000, le=2100)
    # Range is checked by the calculator so callers get an invalid_month error.
    month: int


class RangeAvailabilityFilters(BaseSchema):
    property_id: Optional[str] = None
    start_date: date
    end_date: date
