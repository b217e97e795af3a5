from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple
from uuid import uuid4

from src.analytics.availability import qualifying_bookings
from src.analytics.pricing import compute_stay
from src.core.errors import BadRequestError, BookingConflictError, NotFoundError
from src.models.bookings import CANCELLED_STATUS, BookingRecord, PropertyRecord
from src.repositories.bookings_repository import BookingsRepository
from src.repositories.properties_repository import PropertiesRepository
from src.schemas.bookings import (
    BookingCreateRequest,
    BookingDetail,
    BookingStatusUpdateRequest,
    BookingSummary,
    StayQuoteResponse,
)
from src.shared.time import ranges_overlap


logger = logging.getLogger(__name__)


class BookingsService:
    def __init__(
        self,
        repository: BookingsRepository,
        properties_repository: PropertiesRepository,
        max_guests: int = 20,
        max_stay_nights: int = 30,
    ) -> None:
        self.repository = repository
        self.properties_repository = properties_repository
        self.max_guests = max_guests
        self.max_stay_nights = max_stay_nights

    def list_bookings(
        self,
        property_id: Optional[str],
        status: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        page: int,
        page_size: int,
    ) -> Tuple[List[BookingSummary], int]:
        records, total = self.repository.list_bookings(
            property_id=property_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
            page=page,
            page_size=page_size,
        )
        return [self._to_booking_summary(record) for record in records], total

    def get_booking(self, booking_id: str) -> BookingDetail:
        record = self.repository.get_booking_by_id(booking_id)
        if not record:
            raise NotFoundError("Booking not found")
        return self._to_booking_detail(record)

    def quote_stay(
        self, property_id: str, check_in: date, check_out: date, guests: int
    ) -> StayQuoteResponse:
        property_record = self._get_property(property_id)
        return self._quote(property_record, check_in, check_out, guests)

    def create_booking(self, request: BookingCreateRequest) -> BookingDetail:
        property_record = self._get_property(request.property_id)
        quote = self._quote(property_record, request.check_in, request.check_out, request.guests)

        self._ensure_dates_free(request.property_id, request.check_in, request.check_out)

        payload = {
            "booking_id": f"booking_{uuid4().hex[:12]}",
            "property_id": request.property_id,
            "guest_name": request.guest_name,
            "guest_email": request.guest_email,
            "guest_phone": request.guest_phone or "",
            "check_in": request.check_in.isoformat(),
            "check_out": request.check_out.isoformat(),
            "guests": request.guests,
            "total_amount": str(quote.total_amount),
            "status": "pending",
            "payment_status": "pending",
            "special_requests": request.special_requests or "",
        }
        record = self.repository.create_booking(payload)
        logger.info(
            "Created booking %s for property %s (%d nights)",
            record.id,
            request.property_id,
            quote.nights,
        )
        return self._to_booking_detail(record)

    def update_booking_status(
        self, booking_id: str, request: BookingStatusUpdateRequest
    ) -> BookingDetail:
        current = self.repository.get_booking_by_id(booking_id)
        if not current:
            raise NotFoundError("Booking not found")
        if current.is_cancelled and request.status != CANCELLED_STATUS and current.property_id:
            self._ensure_dates_free(
                current.property_id,
                current.check_in,
                current.check_out,
                exclude_booking_id=current.id,
            )

        payload = {"status": request.status}
        if request.payment_status:
            payload["payment_status"] = request.payment_status
        record = self.repository.update_booking(booking_id, payload)
        if not record:
            raise NotFoundError("Booking not found")
        logger.info("Booking %s moved to status %s", booking_id, request.status)
        return self._to_booking_detail(record)

    def _ensure_dates_free(
        self,
        property_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        existing = self.repository.list_bookings_in_range(property_id, check_in, check_out)
        conflicting = [
            booking.id
            for booking in qualifying_bookings(property_id, existing)
            if booking.id != exclude_booking_id
            and ranges_overlap(booking.check_in, booking.check_out, check_in, check_out)
        ]
        if conflicting:
            raise BookingConflictError(
                "Property is already booked for some of the selected dates",
                conflicting_booking_ids=conflicting,
            )

    def _get_property(self, property_id: str) -> PropertyRecord:
        property_record = self.properties_repository.get_property_by_id(property_id)
        if not property_record:
            raise NotFoundError("Property not found")
        return property_record

    def _quote(
        self, property_record: PropertyRecord, check_in: date, check_out: date, guests: int
    ) -> StayQuoteResponse:
        self._validate_guests(property_record, guests)
        stay = compute_stay(check_in, check_out, property_record.base_price)
        if stay.nights > self.max_stay_nights:
            raise BadRequestError(f"Maximum booking duration is {self.max_stay_nights} nights")
        return StayQuoteResponse(
            property_id=property_record.id,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            base_price_per_night=property_record.base_price,
            nights=stay.nights,
            total_amount=stay.total_amount,
        )

    def _validate_guests(self, property_record: PropertyRecord, guests: int) -> None:
        if guests < 1:
            raise BadRequestError("At least 1 guest is required")
        if guests > self.max_guests:
            raise BadRequestError(f"Maximum {self.max_guests} guests allowed per booking")
        if property_record.max_guests and guests > property_record.max_guests:
            raise BadRequestError(
                f"This property accommodates at most {property_record.max_guests} guests"
            )

    def _to_booking_summary(self, record: BookingRecord) -> BookingSummary:
        return BookingSummary(
            id=record.id,
            booking_id=record.booking_id,
            property_id=record.property_id,
            guest_name=record.guest_name,
            check_in=record.check_in,
            check_out=record.check_out,
            nights=max((record.check_out - record.check_in).days, 0),
            guests=record.guests,
            total_amount=record.total_amount,
            status=record.status,
            payment_status=record.payment_status,
        )

    def _to_booking_detail(self, record: BookingRecord) -> BookingDetail:
        return BookingDetail(
            **self._to_booking_summary(record).model_dump(),
            guest_email=record.guest_email,
            guest_phone=record.guest_phone,
            special_requests=record.special_requests,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
