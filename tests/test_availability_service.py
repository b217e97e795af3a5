from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

import pytest

from src.core.errors import BadRequestError, InvalidDateRangeError, InvalidMonthError
from src.models.bookings import BookingRecord
from src.services.availability_service import AvailabilityService


class StubBookingsRepository:
    def __init__(self, bookings: List[BookingRecord]) -> None:
        self.bookings = bookings
        self.range_calls: List[Tuple[str, date, date]] = []
        self.active_from: List[date] = []

    def list_bookings_in_range(
        self, property_id: str, start_date: date, end_date: date
    ) -> List[BookingRecord]:
        self.range_calls.append((property_id, start_date, end_date))
        return [
            booking
            for booking in self.bookings
            if booking.property_id == property_id
            and booking.check_out >= start_date
            and booking.check_in <= end_date
        ]

    def list_active_bookings(self, from_date: date) -> List[BookingRecord]:
        self.active_from.append(from_date)
        return [booking for booking in self.bookings if booking.check_out >= from_date]


class StubPropertiesRepository:
    def __init__(self, names: Dict[str, str]) -> None:
        self.names = names
        self.requested_ids: List[str] = []

    def list_property_names(self, property_ids: Iterable[str]) -> Dict[str, str]:
        self.requested_ids = sorted(set(property_ids))
        return {key: value for key, value in self.names.items() if key in self.requested_ids}


def _bookings() -> List[BookingRecord]:
    return [
        BookingRecord(
            id="b1",
            property_id="villa-1",
            guest_name="Asha Rao",
            check_in=date(2024, 5, 10),
            check_out=date(2024, 5, 13),
            total_amount=Decimal("9000"),
            status="confirmed",
        ),
        BookingRecord(
            id="b2",
            property_id="villa-2",
            guest_name="Vikram Shah",
            check_in=date(2024, 5, 28),
            check_out=date(2024, 6, 3),
            total_amount=Decimal("24000"),
            status="pending",
        ),
    ]


def _service(max_range_days: int = 366) -> Tuple[AvailabilityService, StubBookingsRepository, StubPropertiesRepository]:
    repository = StubBookingsRepository(_bookings())
    properties = StubPropertiesRepository({"villa-1": "Casa Azul", "villa-2": "Palm Grove"})
    service = AvailabilityService(
        repository=repository,
        properties_repository=properties,
        max_range_days=max_range_days,
    )
    return service, repository, properties


def test_monthly_availability_queries_month_window() -> None:
    service, repository, _ = _service()
    result = service.get_monthly_availability("villa-1", 2024, 5)
    assert repository.range_calls == [("villa-1", date(2024, 5, 1), date(2024, 5, 31))]
    assert result.occupancy.booked_days == 3
    assert result.occupancy.total_revenue == Decimal("9000")


def test_monthly_availability_without_property_skips_fetch() -> None:
    service, repository, _ = _service()
    result = service.get_monthly_availability(None, 2024, 5)
    assert repository.range_calls == []
    assert result.occupancy.available_days == 31


def test_invalid_month_fails_before_fetch() -> None:
    service, repository, _ = _service()
    with pytest.raises(InvalidMonthError):
        service.get_monthly_availability("villa-1", 2024, 13)
    assert repository.range_calls == []


def test_range_availability_limits_span() -> None:
    service, repository, _ = _service(max_range_days=31)
    with pytest.raises(BadRequestError):
        service.get_range_availability("villa-1", date(2024, 1, 1), date(2024, 2, 1))
    assert repository.range_calls == []

    result = service.get_range_availability("villa-1", date(2024, 5, 1), date(2024, 5, 31))
    assert result.total_bookings == 1


def test_range_availability_rejects_reversed_dates() -> None:
    service, _, _ = _service()
    with pytest.raises(InvalidDateRangeError):
        service.get_range_availability("villa-1", date(2024, 5, 31), date(2024, 5, 1))


def test_properties_summary_resolves_names() -> None:
    service, repository, properties = _service()
    summaries = service.get_properties_summary(today=date(2024, 5, 1))
    assert repository.active_from == [date(2024, 5, 1)]
    assert properties.requested_ids == ["villa-1", "villa-2"]
    assert [(item.property_name, item.next_available) for item in summaries] == [
        ("Casa Azul", date(2024, 5, 13)),
        ("Palm Grove", date(2024, 6, 3)),
    ]
