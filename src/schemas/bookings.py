from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from src.shared.base import BaseSchema


BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]


class StayQuote(BaseSchema):
    nights: int
    total_amount: Decimal


class StayQuoteRequest(BaseSchema):
    property_id: str = Field(..., min_length=1)
    check_in: date
    check_out: date
    guests: int = 1


class StayQuoteResponse(StayQuote):
    property_id: str
    check_in: date
    check_out: date
    guests: int
    base_price_per_night: Decimal


class BookingSummary(BaseSchema):
    id: str
    booking_id: Optional[str] = None
    property_id: Optional[str] = None
    guest_name: Optional[str] = None
    check_in: date
    check_out: date
    nights: int
    guests: Optional[int] = None
    total_amount: Decimal
    status: str
    payment_status: Optional[str] = None


class BookingDetail(BookingSummary):
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    special_requests: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookingCreateRequest(BaseSchema):
    property_id: str = Field(..., min_length=1)
    guest_name: str = Field(..., min_length=1)
    guest_email: str = Field(..., min_length=3)
    guest_phone: Optional[str] = None
    check_in: date
    check_out: date
    guests: int = 1
    special_requests: Optional[str] = None


class BookingStatusUpdateRequest(BaseSchema):
    status: BookingStatus
    payment_status: Optional[PaymentStatus] = None


class BookingListFilters(BaseSchema):
    property_id: Optional[str] = None
    status: Optional[BookingStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)
