from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.schemas import (
    BookingCreateSchema,
    BookingListResponseSchema,
    BookingSchema,
    CompletedReportSchema,
    SideStatusUpdateSchema,
)
from app.application.exceptions import (
    ActorNotAllowedError,
    BookingError,
    BookingNotFoundError,
    BookingStoreError,
    InvalidTransitionError,
    StatusConflictError,
)
from app.application.use_cases.cancel_booking_request import CancelBookingRequestUseCase
from app.application.use_cases.completed_report import CompletedBookingsReportUseCase
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.application.use_cases.get_booking_status import GetBookingStatusUseCase
from app.application.use_cases.list_bookings import ListBookingsUseCase
from app.application.use_cases.update_side_status import UpdateSideStatusUseCase
from app.domain.entities.booking_status import CombinedStatus
from app.wiring.dependencies import (
    get_booking_status_use_case,
    get_cancel_booking_request_use_case,
    get_completed_report_use_case,
    get_create_booking_use_case,
    get_list_bookings_use_case,
    get_update_side_status_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[BookingError], int] = {
    BookingNotFoundError: 404,
    ActorNotAllowedError: 403,
    InvalidTransitionError: 409,
    StatusConflictError: 409,
    BookingStoreError: 502,
}


def _http_error(e: BookingError, booking_id: str | None = None) -> HTTPException:
    status_code = _STATUS_CODES.get(type(e), 500)
    logger.warning(
        "Booking request failed",
        extra={"booking_id": booking_id, "error": f"{type(e).__name__}: {e}"},
    )
    return HTTPException(status_code=status_code, detail=e.message_ja)


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def create_booking(
    req: BookingCreateSchema,
    uc: CreateBookingUseCase = Depends(get_create_booking_use_case),
):
    try:
        booking = uc.execute(**req.model_dump())
    except BookingError as e:
        raise _http_error(e)
    return BookingSchema.from_entity(booking)


@router.get("/bookings", response_model=BookingListResponseSchema)
def list_bookings(
    user_id: str | None = Query(None),
    therapist_id: str | None = Query(None),
    store_id: str | None = Query(None),
    uc: ListBookingsUseCase = Depends(get_list_bookings_use_case),
):
    filters = {
        field: value
        for field, value in (("user_id", user_id), ("therapist_id", therapist_id), ("store_id", store_id))
        if value
    }
    if len(filters) != 1:
        raise HTTPException(status_code=400, detail="user_id, therapist_id, store_id のいずれか1つを指定してください")
    field, value = next(iter(filters.items()))

    try:
        grouped = uc.execute(field, value)
    except BookingError as e:
        raise _http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return BookingListResponseSchema(
        pending=[BookingSchema.from_entity(b) for b in grouped[CombinedStatus.PENDING]],
        confirmed=[BookingSchema.from_entity(b) for b in grouped[CombinedStatus.CONFIRMED]],
        completed=[BookingSchema.from_entity(b) for b in grouped[CombinedStatus.COMPLETED]],
        cancelled=[BookingSchema.from_entity(b) for b in grouped[CombinedStatus.CANCELLED]],
        total=sum(len(items) for items in grouped.values()),
    )


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    uc: GetBookingStatusUseCase = Depends(get_booking_status_use_case),
):
    try:
        booking, _ = uc.execute(booking_id)
    except BookingError as e:
        raise _http_error(e, booking_id)
    return BookingSchema.from_entity(booking)


@router.patch("/bookings/{booking_id}/status", response_model=BookingSchema)
def update_side_status(
    booking_id: str,
    req: SideStatusUpdateSchema,
    uc: UpdateSideStatusUseCase = Depends(get_update_side_status_use_case),
):
    try:
        booking = uc.execute(booking_id, req.actor, req.status)
    except BookingError as e:
        raise _http_error(e, booking_id)
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking_request(
    booking_id: str,
    uc: CancelBookingRequestUseCase = Depends(get_cancel_booking_request_use_case),
):
    try:
        booking = uc.execute(booking_id)
    except BookingError as e:
        raise _http_error(e, booking_id)
    return BookingSchema.from_entity(booking)


@router.get("/reports/completed", response_model=CompletedReportSchema)
def completed_report(
    day: date = Query(...),
    uc: CompletedBookingsReportUseCase = Depends(get_completed_report_use_case),
):
    try:
        bookings = uc.execute(day)
    except BookingError as e:
        raise _http_error(e)
    return CompletedReportSchema(
        day=day,
        count=len(bookings),
        bookings=[BookingSchema.from_entity(b) for b in bookings],
    )
