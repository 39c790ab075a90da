from typing import Optional

from fastapi import APIRouter, Depends

from ..models import BookingStatus, User
from ..schemas import (
    BookingCancelIn,
    BookingCreateIn,
    BookingOut,
    BookingStatusUpdateIn,
    PageOut,
    PaymentStatusUpdateIn,
)
from ..deps import get_booking_service
from ..security import require_admin, require_user
from ..services.booking import BookingService

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post("", response_model=BookingOut, status_code=201)
def create_booking(payload: BookingCreateIn, user: User = Depends(require_user), bookings: BookingService = Depends(get_booking_service)):
    return bookings.create_booking(user.id, payload)


@router.get("/my", response_model=PageOut[BookingOut])
def my_bookings(page: int = 1, limit: int = 10, user: User = Depends(require_user), bookings: BookingService = Depends(get_booking_service)):
    return bookings.list_for_user(user.id, page, limit)


@router.get("/reference/{reference}", response_model=BookingOut)
def booking_by_reference(reference: str, user: User = Depends(require_user), bookings: BookingService = Depends(get_booking_service)):
    return bookings.get_by_reference(reference, user.id, user.role)


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: int, user: User = Depends(require_user), bookings: BookingService = Depends(get_booking_service)):
    return bookings.get_by_id(booking_id, user.id, user.role)


@router.patch("/{booking_id}/cancel", response_model=BookingOut)
def cancel_booking(booking_id: int, payload: Optional[BookingCancelIn] = None, user: User = Depends(require_user), bookings: BookingService = Depends(get_booking_service)):
    reason = payload.reason if payload else None
    return bookings.cancel(booking_id, user.id, user.role, reason)

# ==== Admin ====

@router.get("", response_model=PageOut[BookingOut])
def all_bookings(status: Optional[BookingStatus] = None, page: int = 1, limit: int = 10, admin: User = Depends(require_admin), bookings: BookingService = Depends(get_booking_service)):
    return bookings.list_all(status, page, limit)


@router.patch("/{booking_id}/status", response_model=BookingOut)
def update_booking_status(booking_id: int, payload: BookingStatusUpdateIn, admin: User = Depends(require_admin), bookings: BookingService = Depends(get_booking_service)):
    return bookings.update_status(booking_id, payload, admin.id, admin.role)


@router.patch("/{booking_id}/payment", response_model=BookingOut)
def update_payment_status(booking_id: int, payload: PaymentStatusUpdateIn, admin: User = Depends(require_admin), bookings: BookingService = Depends(get_booking_service)):
    return bookings.update_payment_status(booking_id, payload)
