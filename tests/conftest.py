from __future__ import annotations

import os
from datetime import date
from decimal import Decimal
from typing import List, Optional

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from fastapi.testclient import TestClient

from src.analytics.availability import (
    compute_monthly_availability,
    compute_range_availability,
    summarize_properties_availability,
)
from src.analytics.pricing import compute_stay
from src.api.dependencies import get_availability_service, get_bookings_service
from src.core.errors import BookingConflictError, NotFoundError
from src.main import create_app
from src.models.bookings import BookingRecord
from src.schemas.availability import (
    MonthlyAvailability,
    PropertyAvailabilitySummary,
    RangeAvailability,
)
from src.schemas.bookings import (
    BookingCreateRequest,
    BookingDetail,
    BookingStatusUpdateRequest,
    BookingSummary,
    StayQuoteResponse,
)


def make_booking(
    booking_id: str = "booking-1",
    property_id: str = "villa-1",
    check_in: date = date(2024, 5, 10),
    check_out: date = date(2024, 5, 13),
    total_amount: str = "9000",
    status: str = "confirmed",
    guest_name: str = "Asha Rao",
) -> BookingRecord:
    return BookingRecord(
        id=booking_id,
        property_id=property_id,
        guest_name=guest_name,
        check_in=check_in,
        check_out=check_out,
        total_amount=Decimal(total_amount),
        status=status,
    )


SAMPLE_BOOKINGS = [
    make_booking(),
    make_booking(
        booking_id="booking-2",
        check_in=date(2024, 5, 20),
        check_out=date(2024, 5, 22),
        total_amount="6000",
        status="cancelled",
    ),
]


class FakeAvailabilityService:
    def get_monthly_availability(
        self, property_id: Optional[str], year: int, month: int
    ) -> MonthlyAvailability:
        return compute_monthly_availability(property_id, year, month, SAMPLE_BOOKINGS)

    def get_range_availability(
        self, property_id: Optional[str], start_date: date, end_date: date
    ) -> RangeAvailability:
        return compute_range_availability(property_id, start_date, end_date, SAMPLE_BOOKINGS)

    def get_properties_summary(self) -> List[PropertyAvailabilitySummary]:
        return summarize_properties_availability(
            SAMPLE_BOOKINGS, {"villa-1": "Casa Azul"}, date(2024, 5, 1)
        )


class FakeBookingsService:
    def list_bookings(self, **_: object):
        return (
            [
                BookingSummary(
                    id="booking-1",
                    booking_id="booking_abc123",
                    property_id="villa-1",
                    guest_name="Asha Rao",
                    check_in=date(2024, 5, 10),
                    check_out=date(2024, 5, 13),
                    nights=3,
                    guests=2,
                    total_amount=Decimal("9000"),
                    status="confirmed",
                    payment_status="paid",
                )
            ],
            1,
        )

    def get_booking(self, booking_id: str) -> BookingDetail:
        if booking_id != "booking-1":
            raise NotFoundError("Booking not found")
        summaries, _ = self.list_bookings()
        return BookingDetail(
            **summaries[0].model_dump(),
            guest_email="asha@example.com",
            guest_phone="+91 90000 00000",
            special_requests="Late check-in",
        )

    def quote_stay(
        self, property_id: str, check_in: date, check_out: date, guests: int
    ) -> StayQuoteResponse:
        stay = compute_stay(check_in, check_out, Decimal("3000"))
        return StayQuoteResponse(
            property_id=property_id,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            base_price_per_night=Decimal("3000"),
            nights=stay.nights,
            total_amount=stay.total_amount,
        )

    def create_booking(self, request: BookingCreateRequest) -> BookingDetail:
        if request.check_in == date(2024, 5, 11):
            raise BookingConflictError(
                "Property is already booked for some of the selected dates",
                conflicting_booking_ids=["booking-1"],
            )
        stay = compute_stay(request.check_in, request.check_out, Decimal("3000"))
        return BookingDetail(
            id="booking-new",
            booking_id="booking_new123",
            property_id=request.property_id,
            guest_name=request.guest_name,
            guest_email=request.guest_email,
            check_in=request.check_in,
            check_out=request.check_out,
            nights=stay.nights,
            guests=request.guests,
            total_amount=stay.total_amount,
            status="pending",
            payment_status="pending",
        )

    def update_booking_status(
        self, booking_id: str, request: BookingStatusUpdateRequest
    ) -> BookingDetail:
        if booking_id == "booking-old" and request.status != "cancelled":
            raise BookingConflictError(
                "Property is already booked for some of the selected dates",
                conflicting_booking_ids=["booking-1"],
            )
        detail = self.get_booking(booking_id)
        return detail.model_copy(update={"status": request.status})


@pytest.fixture()
def client() -> TestClient:
    app = create_app()
    app.dependency_overrides[get_availability_service] = FakeAvailabilityService
    app.dependency_overrides[get_bookings_service] = FakeBookingsService
    return TestClient(app)
