from __future__ import annotations

from functools import lru_cache

from src.core.config import get_settings
from src.repositories.bookings_repository import BookingsRepository
from src.repositories.properties_repository import PropertiesRepository
from src.services.availability_service import AvailabilityService
from src.services.bookings_service import BookingsService


@lru_cache
def get_bookings_repository() -> BookingsRepository:
    return BookingsRepository()


@lru_cache
def get_properties_repository() -> PropertiesRepository:
    return PropertiesRepository()


def get_availability_service() -> AvailabilityService:
    settings = get_settings()
    return AvailabilityService(
        repository=get_bookings_repository(),
        properties_repository=get_properties_repository(),
        max_range_days=settings.max_availability_range_days,
    )


def get_bookings_service() -> BookingsService:
    settings = get_settings()
    return BookingsService(
        repository=get_bookings_repository(),
        properties_repository=get_properties_repository(),
        max_guests=settings.max_guests_per_booking,
        max_stay_nights=settings.max_stay_nights,
    )
