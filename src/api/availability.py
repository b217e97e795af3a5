from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_availability_service
from src.schemas.availability import (
    MonthlyAvailability,
    MonthlyAvailabilityFilters,
    PropertyAvailabilitySummary,
    RangeAvailability,
    RangeAvailabilityFilters,
)
from src.services.availability_service import AvailabilityService
from src.shared.response import ResponseEnvelope, build_meta


router = APIRouter(prefix="/availability", tags=["availability"])


def get_monthly_filters(
    property_id: Optional[str] = Query(default=None, alias="property_id"),
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(...),
) -> MonthlyAvailabilityFilters:
    return MonthlyAvailabilityFilters(property_id=property_id, year=year, month=month)


def get_range_filters(
    property_id: Optional[str] = Query(default=None, alias="property_id"),
    start_date: date = Query(..., alias="start_date"),
    end_date: date = Query(..., alias="end_date"),
) -> RangeAvailabilityFilters:
    return RangeAvailabilityFilters(
        property_id=property_id, start_date=start_date, end_date=end_date
    )


@router.get("/monthly")
def monthly_availability(
    filters: MonthlyAvailabilityFilters = Depends(get_monthly_filters),
    service: AvailabilityService = Depends(get_availability_service),
) -> ResponseEnvelope[MonthlyAvailability]:
    data = service.get_monthly_availability(filters.property_id, filters.year, filters.month)
    meta = build_meta(
        source="bookings",
        time_window=f"{filters.year:04d}-{filters.month:02d}",
        property_id=filters.property_id,
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/range")
def range_availability(
    filters: RangeAvailabilityFilters = Depends(get_range_filters),
    service: AvailabilityService = Depends(get_availability_service),
) -> ResponseEnvelope[RangeAvailability]:
    data = service.get_range_availability(
        filters.property_id, filters.start_date, filters.end_date
    )
    meta = build_meta(
        source="bookings",
        time_window=f"{filters.start_date.isoformat()}/{filters.end_date.isoformat()}",
        property_id=filters.property_id,
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/properties")
def properties_availability(
    service: AvailabilityService = Depends(get_availability_service),
) -> ResponseEnvelope[List[PropertyAvailabilitySummary]]:
    data = service.get_properties_summary()
    return ResponseEnvelope(data=data, meta=build_meta(source="bookings,properties"))
