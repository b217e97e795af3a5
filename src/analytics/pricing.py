from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from math import ceil

from src.core.errors import BadRequestError, InvalidDateRangeError
from src.schemas.bookings import StayQuote


SECONDS_PER_DAY = 24 * 60 * 60


def count_nights(check_in: date, check_out: date) -> int:
    if isinstance(check_in, datetime) and isinstance(check_out, datetime):
        if check_out <= check_in:
            raise InvalidDateRangeError()
        return ceil((check_out - check_in).total_seconds() / SECONDS_PER_DAY)
    # A calendar date paired with a timestamp is compared on calendar days.
    nights = (_calendar_day(check_out) - _calendar_day(check_in)).days
    if nights <= 0:
        raise InvalidDateRangeError()
    return nights


def compute_stay(check_in: date, check_out: date, base_price_per_night: Decimal) -> StayQuote:
    """Price a stay as nights times the nightly base rate.

    Guest count is not an input: the rate is per property, not per person.
    """
    base_price = Decimal(str(base_price_per_night))
    if base_price < 0:
        raise BadRequestError("Base price per night must be non-negative")
    nights = count_nights(check_in, check_out)
    return StayQuote(nights=nights, total_amount=base_price * nights)


def _calendar_day(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
