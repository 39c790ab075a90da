from typing import List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from ..config import settings
from ..errors import InvalidRequestError
from ..limiter import limiter
from ..models import User
from ..schemas import HotelCreateIn, HotelOut, HotelUpdateIn, MessageOut, PageOut
from ..deps import get_hotel_service
from ..security import require_admin
from ..services.catalog import HotelService
from ..services.media import save_image

router = APIRouter(prefix="/api/v1/hotels", tags=["hotels"])


@router.get("", response_model=PageOut[HotelOut])
@limiter.limit(settings.RATE_LIMIT_SEARCH)
def list_hotels(
    request: Request,
    city: Optional[str] = None,
    country: Optional[str] = None,
    search: Optional[str] = None,
    star_rating: Optional[int] = None,
    is_featured: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
    hotels: HotelService = Depends(get_hotel_service),
):
    return hotels.search_hotels(city, country, search, star_rating, is_featured, page, limit)


@router.get("/featured", response_model=List[HotelOut])
def featured_hotels(hotels: HotelService = Depends(get_hotel_service)):
    return hotels.list_featured()


@router.get("/{hotel_id}", response_model=HotelOut)
def get_hotel(hotel_id: int, hotels: HotelService = Depends(get_hotel_service)):
    return hotels.get_hotel(hotel_id)


@router.post("", response_model=HotelOut, status_code=201)
def create_hotel(payload: HotelCreateIn, admin: User = Depends(require_admin), hotels: HotelService = Depends(get_hotel_service)):
    return hotels.create_hotel(payload, created_by=admin.id)


@router.put("/{hotel_id}", response_model=HotelOut)
def update_hotel(hotel_id: int, payload: HotelUpdateIn, admin: User = Depends(require_admin), hotels: HotelService = Depends(get_hotel_service)):
    return hotels.update_hotel(hotel_id, payload)


@router.delete("/{hotel_id}", response_model=MessageOut)
def delete_hotel(hotel_id: int, admin: User = Depends(require_admin), hotels: HotelService = Depends(get_hotel_service)):
    hotels.delete_hotel(hotel_id)
    return MessageOut(message="Hotel deleted")


@router.patch("/{hotel_id}/featured", response_model=HotelOut)
def toggle_featured(hotel_id: int, admin: User = Depends(require_admin), hotels: HotelService = Depends(get_hotel_service)):
    return hotels.toggle_featured(hotel_id)


@router.post("/{hotel_id}/image", response_model=HotelOut)
async def upload_hotel_image(hotel_id: int, image: UploadFile = File(...), admin: User = Depends(require_admin), hotels: HotelService = Depends(get_hotel_service)):
    hotels.get_hotel(hotel_id)
    data = await image.read()
    url = save_image(data, image.filename, folder="hotelbook/hotels")
    if not url:
        raise InvalidRequestError("Upload must be a JPEG, PNG, GIF or WEBP image within the size limit")
    return hotels.set_image(hotel_id, url)
