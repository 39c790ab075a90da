from datetime import date
from typing import List

from fastapi import APIRouter, Depends, File, Query, UploadFile

from ..errors import InvalidRequestError
from ..models import User
from ..schemas import MessageOut, PageOut, RoomCreateIn, RoomOut, RoomStatusUpdateIn, RoomUpdateIn
from ..deps import get_availability_service, get_hotel_service, get_room_service
from ..security import require_admin
from ..services.availability import AvailabilityService
from ..services.catalog import HotelService, RoomService
from ..services.media import save_image

router = APIRouter(prefix="/api/v1/hotels/{hotel_id}/rooms", tags=["rooms"])


@router.get("", response_model=PageOut[RoomOut])
def list_rooms(hotel_id: int, page: int = 1, limit: int = 10, rooms: RoomService = Depends(get_room_service)):
    return rooms.list_rooms(hotel_id, page, limit)


@router.get("/available", response_model=List[RoomOut])
def available_rooms(
    hotel_id: int,
    check_in: date,
    check_out: date,
    adults: int = Query(1, ge=1),
    children: int = Query(0, ge=0),
    hotels: HotelService = Depends(get_hotel_service),
    availability: AvailabilityService = Depends(get_availability_service),
):
    hotels.get_hotel(hotel_id)
    if check_in >= check_out:
        raise InvalidRequestError("Check-out must be after check-in")
    return availability.find_available_rooms(hotel_id, check_in, check_out, adults, children)


@router.get("/{room_id}", response_model=RoomOut)
def get_room(hotel_id: int, room_id: int, rooms: RoomService = Depends(get_room_service)):
    return rooms.get_room(room_id, hotel_id)


@router.post("", response_model=RoomOut, status_code=201)
def create_room(hotel_id: int, payload: RoomCreateIn, admin: User = Depends(require_admin), rooms: RoomService = Depends(get_room_service)):
    return rooms.create_room(hotel_id, payload)


@router.put("/{room_id}", response_model=RoomOut)
def update_room(hotel_id: int, room_id: int, payload: RoomUpdateIn, admin: User = Depends(require_admin), rooms: RoomService = Depends(get_room_service)):
    return rooms.update_room(room_id, payload, hotel_id)


@router.patch("/{room_id}/status", response_model=RoomOut)
def update_room_status(hotel_id: int, room_id: int, payload: RoomStatusUpdateIn, admin: User = Depends(require_admin), rooms: RoomService = Depends(get_room_service)):
    return rooms.update_room_status(room_id, payload.status, hotel_id)


@router.delete("/{room_id}", response_model=MessageOut)
def delete_room(hotel_id: int, room_id: int, admin: User = Depends(require_admin), rooms: RoomService = Depends(get_room_service)):
    rooms.delete_room(room_id, hotel_id)
    return MessageOut(message="Room deleted")


@router.post("/{room_id}/image", response_model=RoomOut)
async def upload_room_image(hotel_id: int, room_id: int, image: UploadFile = File(...), admin: User = Depends(require_admin), rooms: RoomService = Depends(get_room_service)):
    rooms.get_room(room_id, hotel_id)
    data = await image.read()
    url = save_image(data, image.filename, folder="hotelbook/rooms")
    if not url:
        raise InvalidRequestError("Upload must be a JPEG, PNG, GIF or WEBP image within the size limit")
    return rooms.set_image(room_id, url, hotel_id)
