from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from studio_pos.api.deps import get_catalog, get_current_operator, get_store
from studio_pos.api.errors import to_http
from studio_pos.domain.catalog import Catalog
from studio_pos.domain.errors import DomainError
from studio_pos.domain.models import Operator
from studio_pos.domain.schemas import BookingStatusOut, StatusIn, TimeSlotOut
from studio_pos.repos.sql_store import SqlStudioStore
from studio_pos.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_service(
    store: SqlStudioStore = Depends(get_store),
    catalog: Catalog = Depends(get_catalog),
) -> BookingService:
    return BookingService(store=store, catalog=catalog)


@router.get("", response_model=List[BookingStatusOut])
def list_bookings(
    day: date | None = Query(None, alias="date"),
    operator: Operator = Depends(get_current_operator),
    svc: BookingService = Depends(get_service),
):
    return svc.list_bookings(day)


@router.get("/available", response_model=List[TimeSlotOut])
def available_slots(
    day: date = Query(..., alias="date"),
    operator: Operator = Depends(get_current_operator),
    svc: BookingService = Depends(get_service),
):
    return list(svc.available_slots(day))


@router.patch("/{booking_id}/status", response_model=BookingStatusOut)
def set_status(
    booking_id: str,
    payload: StatusIn,
    operator: Operator = Depends(get_current_operator),
    svc: BookingService = Depends(get_service),
):
    try:
        return svc.set_status(booking_id, payload.status)
    except DomainError as e:
        raise to_http(e)
