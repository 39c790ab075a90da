"""Request-scoped construction of the service layer.

Each dependency builds its service from the request's database session, so
nothing below the routers holds module-level state.
"""
from fastapi import BackgroundTasks, Depends
from sqlalchemy.orm import Session

from .db import get_db
from .services.availability import AvailabilityService
from .services.booking import BookingService
from .services.catalog import HotelService, RoomService
from .services.mail import send_booking_confirmation_email
from .services.reviews import ReviewService


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_booking_service(background_tasks: BackgroundTasks, db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db, notify=send_booking_confirmation_email, schedule=background_tasks.add_task)


def get_hotel_service(db: Session = Depends(get_db)) -> HotelService:
    return HotelService(db)


def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    return RoomService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)
