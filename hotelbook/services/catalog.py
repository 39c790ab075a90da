import logging
from decimal import Decimal

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..db import paginate
from ..errors import ConflictError, NotFoundError
from ..models import Hotel, Room, RoomStatus
from ..schemas import HotelCreateIn, HotelUpdateIn, RoomCreateIn, RoomUpdateIn

logger = logging.getLogger(__name__)


def _money(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value))


class HotelService:
    def __init__(self, db: Session):
        self.db = db

    def create_hotel(self, payload: HotelCreateIn, created_by: int | None = None) -> Hotel:
        data = payload.model_dump()
        data["email"] = str(data["email"]).lower()
        hotel = Hotel(**data, created_by=created_by)
        self.db.add(hotel)
        self.db.commit()
        self.db.refresh(hotel)
        logger.info("Hotel %s created (%s)", hotel.id, hotel.name)
        return hotel

    def get_hotel(self, hotel_id: int) -> Hotel:
        hotel = self.db.get(Hotel, hotel_id)
        if not hotel:
            raise NotFoundError("Hotel not found")
        return hotel

    def search_hotels(
        self,
        city: str | None = None,
        country: str | None = None,
        search: str | None = None,
        star_rating: int | None = None,
        is_featured: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict:
        q = self.db.query(Hotel).filter(Hotel.is_active == True)  # noqa: E712
        if city:
            q = q.filter(Hotel.city.ilike(f"%{city}%"))
        if country:
            q = q.filter(Hotel.country.ilike(f"%{country}%"))
        if search:
            pattern = f"%{search}%"
            q = q.filter(or_(Hotel.name.ilike(pattern), Hotel.description.ilike(pattern), Hotel.city.ilike(pattern)))
        if star_rating:
            q = q.filter(Hotel.star_rating == star_rating)
        if is_featured is not None:
            q = q.filter(Hotel.is_featured == is_featured)
        return paginate(q.order_by(Hotel.created_at.desc(), Hotel.id.desc()), page, limit)

    def list_featured(self, limit: int = 6) -> list[Hotel]:
        return (
            self.db.query(Hotel)
            .filter(Hotel.is_active == True, Hotel.is_featured == True)  # noqa: E712
            .order_by(Hotel.average_rating.desc(), Hotel.id.asc())
            .limit(limit)
            .all()
        )

    def update_hotel(self, hotel_id: int, payload: HotelUpdateIn) -> Hotel:
        hotel = self.get_hotel(hotel_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if field == "email" and value is not None:
                value = str(value).lower()
            setattr(hotel, field, value)
        self.db.commit()
        self.db.refresh(hotel)
        return hotel

    def delete_hotel(self, hotel_id: int) -> None:
        """Deactivate the hotel; bookings and reviews keep pointing at it."""
        hotel = self.get_hotel(hotel_id)
        hotel.is_active = False
        self.db.commit()
        logger.info("Hotel %s deactivated", hotel_id)

    def toggle_featured(self, hotel_id: int) -> Hotel:
        hotel = self.get_hotel(hotel_id)
        hotel.is_featured = not hotel.is_featured
        self.db.commit()
        self.db.refresh(hotel)
        return hotel

    def set_image(self, hotel_id: int, image_url: str) -> Hotel:
        hotel = self.get_hotel(hotel_id)
        hotel.image_url = image_url
        self.db.commit()
        self.db.refresh(hotel)
        return hotel


class RoomService:
    def __init__(self, db: Session):
        self.db = db

    def create_room(self, hotel_id: int, payload: RoomCreateIn) -> Room:
        hotel = self.db.get(Hotel, hotel_id)
        if not hotel:
            raise NotFoundError("Hotel not found")
        exists = (
            self.db.query(Room.id)
            .filter(Room.hotel_id == hotel_id, Room.room_number == payload.room_number)
            .first()
        )
        if exists:
            raise ConflictError(f"Room number {payload.room_number} already exists in this hotel")

        data = payload.model_dump()
        data["price"] = _money(data["price"])
        data["discount_price"] = _money(data["discount_price"])
        room = Room(hotel_id=hotel_id, **data)
        self.db.add(room)
        hotel.total_rooms = (hotel.total_rooms or 0) + 1
        self.db.commit()
        self.db.refresh(room)
        logger.info("Room %s (%s) added to hotel %s", room.id, room.room_number, hotel_id)
        return room

    def list_rooms(self, hotel_id: int, page: int = 1, limit: int = 10) -> dict:
        q = (
            self.db.query(Room)
            .filter(Room.hotel_id == hotel_id, Room.is_active == True)  # noqa: E712
            .order_by(Room.floor.asc(), Room.room_number.asc())
        )
        return paginate(q, page, limit)

    def get_room(self, room_id: int, hotel_id: int | None = None) -> Room:
        room = self.db.get(Room, room_id)
        if not room or (hotel_id is not None and room.hotel_id != hotel_id):
            raise NotFoundError("Room not found")
        return room

    def update_room(self, room_id: int, payload: RoomUpdateIn, hotel_id: int | None = None) -> Room:
        """Apply only the catalog fields the update lists; existing booking prices are snapshots."""
        room = self.get_room(room_id, hotel_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if field in ("price", "discount_price"):
                value = _money(value)
            setattr(room, field, value)
        self.db.commit()
        self.db.refresh(room)
        return room

    def update_room_status(self, room_id: int, status: RoomStatus, hotel_id: int | None = None) -> Room:
        room = self.get_room(room_id, hotel_id)
        room.status = status
        self.db.commit()
        self.db.refresh(room)
        return room

    def delete_room(self, room_id: int, hotel_id: int | None = None) -> None:
        """Retire the room from the catalog; its booking history stays intact."""
        room = self.get_room(room_id, hotel_id)
        if room.is_active:
            room.is_active = False
            hotel = self.db.get(Hotel, room.hotel_id)
            if hotel and hotel.total_rooms > 0:
                hotel.total_rooms -= 1
        self.db.commit()
        logger.info("Room %s retired", room_id)

    def set_image(self, room_id: int, image_url: str, hotel_id: int | None = None) -> Room:
        room = self.get_room(room_id, hotel_id)
        room.image_url = image_url
        self.db.commit()
        self.db.refresh(room)
        return room
