from __future__ import annotations

from datetime import date
from typing import List, Optional

from src.analytics.availability import (
    compute_monthly_availability,
    compute_range_availability,
    summarize_properties_availability,
)
from src.core.errors import BadRequestError, InvalidDateRangeError
from src.repositories.bookings_repository import BookingsRepository
from src.repositories.properties_repository import PropertiesRepository
from src.schemas.availability import (
    MonthlyAvailability,
    PropertyAvailabilitySummary,
    RangeAvailability,
)
from src.shared.time import month_bounds


class AvailabilityService:
    def __init__(
        self,
        repository: BookingsRepository,
        properties_repository: PropertiesRepository,
        max_range_days: int = 366,
    ) -> None:
        self.repository = repository
        self.properties_repository = properties_repository
        self.max_range_days = max_range_days

    def get_monthly_availability(
        self, property_id: Optional[str], year: int, month: int
    ) -> MonthlyAvailability:
        month_start, month_end = month_bounds(year, month)
        bookings = []
        if property_id:
            bookings = self.repository.list_bookings_in_range(property_id, month_start, month_end)
        return compute_monthly_availability(property_id, year, month, bookings)

    def get_range_availability(
        self, property_id: Optional[str], start_date: date, end_date: date
    ) -> RangeAvailability:
        if end_date < start_date:
            raise InvalidDateRangeError("End date must not be before start date")
        span_days = (end_date - start_date).days + 1
        if span_days > self.max_range_days:
            raise BadRequestError(
                f"Availability range is limited to {self.max_range_days} days"
            )
        bookings = []
        if property_id:
            bookings = self.repository.list_bookings_in_range(property_id, start_date, end_date)
        return compute_range_availability(property_id, start_date, end_date, bookings)

    def get_properties_summary(
        self, today: Optional[date] = None
    ) -> List[PropertyAvailabilitySummary]:
        as_of = today or date.today()
        bookings = self.repository.list_active_bookings(as_of)
        names = self.properties_repository.list_property_names(
            booking.property_id for booking in bookings if booking.property_id
        )
        return summarize_properties_availability(bookings, names, as_of)
