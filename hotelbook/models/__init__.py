from .user import User, UserRole, ADMIN_ROLES, is_admin_role
from .hotel import Hotel
from .room import Room, RoomStatus, RoomType
from .booking import Booking, BookingStatus, PaymentStatus, PaymentMethod, ACTIVE_STATUSES, TERMINAL_STATUSES
from .review import Review
