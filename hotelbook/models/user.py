from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db import Base
from enum import Enum

if TYPE_CHECKING:
    from .booking import Booking

class UserRole(str, Enum):
    GUEST = "guest"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPER_ADMIN)

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))
    role: Mapped[str] = mapped_column(String(20), default=UserRole.GUEST.value, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    bookings: Mapped[list[Booking]] = relationship(back_populates="user")

    @property
    def is_admin(self) -> bool:
        return is_admin_role(self.role)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


def is_admin_role(role: str | UserRole | None) -> bool:
    return role is not None and role in [r.value for r in ADMIN_ROLES]
