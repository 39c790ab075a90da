from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, ForeignKey, Numeric, Boolean, Text, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db import Base

if TYPE_CHECKING:
    from .hotel import Hotel
    from .booking import Booking

class RoomType(str, PyEnum):
    STANDARD = "standard"
    DELUXE = "deluxe"
    SUITE = "suite"
    PRESIDENTIAL = "presidential"
    PENTHOUSE = "penthouse"

class RoomStatus(str, PyEnum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"

class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("hotel_id", "room_number", name="uq_rooms_hotel_room_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hotel_id: Mapped[int] = mapped_column(ForeignKey("hotels.id"), nullable=False, index=True)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[RoomType] = mapped_column(Enum(RoomType), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    capacity_adults: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    capacity_children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    size_sqm: Mapped[int | None] = mapped_column(Integer)
    floor: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bed_type: Mapped[str] = mapped_column(String(50), nullable=False, default="double")
    view: Mapped[str | None] = mapped_column(String(100))
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[RoomStatus] = mapped_column(Enum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    hotel: Mapped[Hotel] = relationship(back_populates="rooms")
    bookings: Mapped[list[Booking]] = relationship(back_populates="room")

    @property
    def effective_price(self) -> Decimal:
        return self.discount_price if self.discount_price is not None else self.price
