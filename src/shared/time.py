from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator, Tuple

from src.core.errors import InvalidMonthError


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Return the first and last calendar day of ``(year, month)``."""
    if not 1 <= month <= 12:
        raise InvalidMonthError(month)
    days_in_month = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days_in_month)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from ``start`` to ``end``, both inclusive."""
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Half-open overlap test for ``[start_a, end_a)`` and ``[start_b, end_b)``."""
    return start_a < end_b and start_b < end_a


def touches_days(check_in: date, check_out: date, first_day: date, last_day: date) -> bool:
    """True when the stay ``[check_in, check_out)`` occupies a day in ``[first_day, last_day]``."""
    return check_in <= last_day and check_out > first_day
