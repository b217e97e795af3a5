from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")
CANCELLED_STATUS = "cancelled"


class BookingRecord(BaseModel):
    id: str
    booking_id: Optional[str] = None
    property_id: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    check_in: date
    check_out: date
    guests: Optional[int] = None
    total_amount: Decimal = Decimal("0")
    status: str = "pending"
    payment_status: Optional[str] = None
    special_requests: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == CANCELLED_STATUS

    @property
    def has_valid_range(self) -> bool:
        return self.check_in < self.check_out


class PropertyRecord(BaseModel):
    id: str
    name: Optional[str] = None
    price_per_night: Optional[Decimal] = None
    price: Optional[Decimal] = None
    max_guests: Optional[int] = None
    is_active: Optional[bool] = None

    @property
    def base_price(self) -> Decimal:
        if self.price_per_night is not None:
            return self.price_per_night
        if self.price is not None:
            return self.price
        return Decimal("0")
