from datetime import date, datetime
from typing import Optional, List, Generic, TypeVar
from pydantic import BaseModel, Field, EmailStr

from .models import BookingStatus, PaymentStatus, PaymentMethod, RoomStatus, RoomType

T = TypeVar("T")

# ==== Shared ====

class PageOut(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

class MessageOut(BaseModel):
    success: bool = True
    message: str

# ==== Auth & Users ====

class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = None

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class ChangePasswordIn(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)

class UserOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: str
    is_active: bool

    class Config:
        from_attributes = True

# ==== Hotels ====

class HotelCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str
    street: str
    city: str
    state: str
    country: str
    zip_code: str
    phone: str
    email: EmailStr
    website: Optional[str] = None
    star_rating: int = Field(ge=1, le=5)
    check_in_time: str = "14:00"
    check_out_time: str = "12:00"
    cancellation_policy: Optional[str] = None
    is_featured: bool = False

class HotelUpdateIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    star_rating: Optional[int] = Field(default=None, ge=1, le=5)
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    cancellation_policy: Optional[str] = None
    is_active: Optional[bool] = None

class HotelOut(BaseModel):
    id: int
    name: str
    description: str
    street: str
    city: str
    state: str
    country: str
    zip_code: str
    phone: str
    email: str
    website: Optional[str] = None
    star_rating: int
    image_url: Optional[str] = None
    check_in_time: str
    check_out_time: str
    cancellation_policy: Optional[str] = None
    is_active: bool
    is_featured: bool
    total_rooms: int
    average_rating: float
    total_reviews: int

    class Config:
        from_attributes = True

# ==== Rooms ====

class RoomCreateIn(BaseModel):
    room_number: str = Field(min_length=1, max_length=20)
    type: RoomType
    name: str
    description: str = ""
    price: float = Field(ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    capacity_adults: int = Field(default=2, ge=1)
    capacity_children: int = Field(default=0, ge=0)
    size_sqm: Optional[int] = None
    floor: int = 1
    bed_type: str = "double"
    view: Optional[str] = None

class RoomUpdateIn(BaseModel):
    type: Optional[RoomType] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    capacity_adults: Optional[int] = Field(default=None, ge=1)
    capacity_children: Optional[int] = Field(default=None, ge=0)
    size_sqm: Optional[int] = None
    floor: Optional[int] = None
    bed_type: Optional[str] = None
    view: Optional[str] = None
    is_active: Optional[bool] = None

class RoomStatusUpdateIn(BaseModel):
    status: RoomStatus

class RoomOut(BaseModel):
    id: int
    hotel_id: int
    room_number: str
    type: RoomType
    name: str
    description: str
    price: float
    discount_price: Optional[float] = None
    effective_price: float
    capacity_adults: int
    capacity_children: int
    size_sqm: Optional[int] = None
    floor: int
    bed_type: str
    view: Optional[str] = None
    image_url: Optional[str] = None
    status: RoomStatus
    is_active: bool

    class Config:
        use_enum_values = True
        from_attributes = True

# ==== Bookings ====

class GuestInfoIn(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=50)

    class Config:
        str_strip_whitespace = True

class BookingCreateIn(BaseModel):
    room_id: int
    hotel_id: int
    check_in: date
    check_out: date
    adults: int = Field(ge=1)
    children: int = Field(default=0, ge=0)
    guest_info: GuestInfoIn
    special_requests: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

class BookingStatusUpdateIn(BaseModel):
    status: BookingStatus
    reason: Optional[str] = None

class BookingCancelIn(BaseModel):
    reason: Optional[str] = None

class PaymentStatusUpdateIn(BaseModel):
    payment_status: PaymentStatus
    payment_intent_id: Optional[str] = None

class BookingOut(BaseModel):
    id: int
    booking_reference: str
    user_id: int
    hotel_id: int
    room_id: int
    check_in: date
    check_out: date
    adults: int
    children: int
    nights: int
    price_per_night: float
    subtotal: float
    taxes: float
    total_amount: float
    status: BookingStatus
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    guest_first_name: str
    guest_last_name: str
    guest_email: str
    guest_phone: str
    special_requests: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        use_enum_values = True
        from_attributes = True

# ==== Reviews ====

class ReviewCreateIn(BaseModel):
    booking_id: int
    rating: int = Field(ge=1, le=5)
    title: str = Field(min_length=1, max_length=100)
    comment: str = Field(min_length=1, max_length=1000)
    cleanliness: int = Field(ge=1, le=5)
    service: int = Field(ge=1, le=5)
    location: int = Field(ge=1, le=5)
    value: int = Field(ge=1, le=5)
    amenities: int = Field(ge=1, le=5)

class ReviewApprovalIn(BaseModel):
    approved: bool = True

class ReviewResponseIn(BaseModel):
    text: str = Field(min_length=1, max_length=1000)

class ReviewOut(BaseModel):
    id: int
    user_id: int
    hotel_id: int
    booking_id: int
    rating: int
    title: str
    comment: str
    cleanliness: int
    service: int
    location: int
    value: int
    amenities: int
    is_verified: bool
    is_approved: bool
    response_text: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

# ==== Admin ====

class MonthlyRevenueOut(BaseModel):
    month: str
    revenue: float
    bookings: int

class DashboardStatsOut(BaseModel):
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    revenue_this_month: float
    revenue_by_month: List[MonthlyRevenueOut]
