from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_bookings_service
from src.schemas.bookings import (
    BookingCreateRequest,
    BookingDetail,
    BookingListFilters,
    BookingStatus,
    BookingStatusUpdateRequest,
    BookingSummary,
    StayQuoteRequest,
    StayQuoteResponse,
)
from src.services.bookings_service import BookingsService
from src.shared.response import ResponseEnvelope, build_meta, build_pagination


router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_booking_list_filters(
    property_id: Optional[str] = Query(default=None, alias="property_id"),
    status: Optional[BookingStatus] = Query(default=None),
    start_date: Optional[date] = Query(default=None, alias="start_date"),
    end_date: Optional[date] = Query(default=None, alias="end_date"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, alias="page_size", ge=1, le=500),
) -> BookingListFilters:
    return BookingListFilters(
        property_id=property_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )


@router.get("")
def list_bookings(
    filters: BookingListFilters = Depends(get_booking_list_filters),
    service: BookingsService = Depends(get_bookings_service),
) -> ResponseEnvelope[List[BookingSummary]]:
    data, total = service.list_bookings(
        property_id=filters.property_id,
        status=filters.status,
        start_date=filters.start_date,
        end_date=filters.end_date,
        page=filters.page,
        page_size=filters.page_size,
    )
    pagination = build_pagination(filters.page, filters.page_size, total)
    meta = build_meta(source="bookings", property_id=filters.property_id)
    return ResponseEnvelope(data=data, pagination=pagination, meta=meta)


@router.post("/quote")
def quote_stay(
    request: StayQuoteRequest,
    service: BookingsService = Depends(get_bookings_service),
) -> ResponseEnvelope[StayQuoteResponse]:
    data = service.quote_stay(
        request.property_id, request.check_in, request.check_out, request.guests
    )
    return ResponseEnvelope(
        data=data, meta=build_meta(source="properties", property_id=request.property_id)
    )


@router.post("", status_code=201)
def create_booking(
    request: BookingCreateRequest,
    service: BookingsService = Depends(get_bookings_service),
) -> ResponseEnvelope[BookingDetail]:
    data = service.create_booking(request)
    return ResponseEnvelope(
        data=data, meta=build_meta(source="bookings", property_id=request.property_id)
    )


@router.get("/{booking_id}")
def get_booking(
    booking_id: str,
    service: BookingsService = Depends(get_bookings_service),
) -> ResponseEnvelope[BookingDetail]:
    data = service.get_booking(booking_id)
    return ResponseEnvelope(data=data, meta=build_meta(source="bookings"))


@router.patch("/{booking_id}/status")
def update_booking_status(
    booking_id: str,
    request: BookingStatusUpdateRequest,
    service: BookingsService = Depends(get_bookings_service),
) -> ResponseEnvelope[BookingDetail]:
    data = service.update_booking_status(booking_id, request)
    return ResponseEnvelope(data=data, meta=build_meta(source="bookings"))
