import logging
from datetime import date

from sqlalchemy.orm import Session

from ..models import Booking, Room, RoomStatus, ACTIVE_STATUSES

logger = logging.getLogger(__name__)


def intervals_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Return True if half-open ranges [start_a, end_a) and [start_b, end_b) intersect.

    Equivalent to the three-clause form: b starts inside a, b ends inside a,
    or b contains a. Ranges that only touch at an endpoint do not overlap.
    """
    return start_a < end_b and end_a > start_b


class AvailabilityService:
    """Read-side decisions over a room's calendar of active bookings."""

    def __init__(self, db: Session):
        self.db = db

    def _overlapping(self, check_in: date, check_out: date):
        return self.db.query(Booking).filter(
            Booking.status.in_(ACTIVE_STATUSES),
            Booking.check_in < check_out,
            Booking.check_out > check_in,
        )

    def is_available(self, room_id: int, check_in: date, check_out: date, exclude_booking_id: int | None = None) -> bool:
        """True iff no active booking of the room overlaps [check_in, check_out).

        An unknown room has no bookings and is reported available; callers
        check existence first.
        """
        q = self._overlapping(check_in, check_out).filter(Booking.room_id == room_id)
        if exclude_booking_id is not None:
            q = q.filter(Booking.id != exclude_booking_id)
        conflicts = q.count()
        if conflicts:
            logger.debug("Room %s has %d overlapping booking(s) for %s..%s", room_id, conflicts, check_in, check_out)
        return conflicts == 0

    def booked_room_ids(self, hotel_id: int, check_in: date, check_out: date) -> set[int]:
        rows = (
            self._overlapping(check_in, check_out)
            .filter(Booking.hotel_id == hotel_id)
            .with_entities(Booking.room_id)
            .distinct()
            .all()
        )
        return {r[0] for r in rows}

    def find_available_rooms(self, hotel_id: int, check_in: date, check_out: date, adults: int, children: int = 0) -> list[Room]:
        booked = self.booked_room_ids(hotel_id, check_in, check_out)
        q = self.db.query(Room).filter(
            Room.hotel_id == hotel_id,
            Room.is_active == True,  # noqa: E712
            Room.status == RoomStatus.AVAILABLE,
            Room.capacity_adults >= adults,
            Room.capacity_children >= children,
        )
        if booked:
            q = q.filter(Room.id.notin_(booked))
        return q.order_by(Room.room_number.asc(), Room.id.asc()).all()
