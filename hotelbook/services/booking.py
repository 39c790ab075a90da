import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import paginate
from ..errors import BookingConflictError, ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from ..models import Booking, BookingStatus, Hotel, PaymentStatus, Room, TERMINAL_STATUSES, is_admin_role
from ..schemas import BookingCreateIn, BookingStatusUpdateIn, PaymentStatusUpdateIn
from .availability import AvailabilityService
from .mail import send_booking_confirmation_email

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
REFERENCE_PREFIX = "HB-"
MAX_REFERENCE_ATTEMPTS = 5

# A guest may only cancel a stay that has not started
GUEST_CANCELLABLE = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass(frozen=True)
class Pricing:
    nights: int
    price_per_night: Decimal
    subtotal: Decimal
    taxes: Decimal
    total_amount: Decimal


def compute_pricing(room: Room, check_in: date, check_out: date, tax_rate: Decimal) -> Pricing:
    """Price a stay at the room's current effective rate.

    Taxes are rounded half-up to the cent; the total is subtotal plus taxes.
    """
    nights = (check_out - check_in).days
    price_per_night = Decimal(str(room.effective_price)).quantize(CENT)
    subtotal = (price_per_night * nights).quantize(CENT)
    taxes = (subtotal * Decimal(str(tax_rate))).quantize(CENT, rounding=ROUND_HALF_UP)
    return Pricing(
        nights=nights,
        price_per_night=price_per_night,
        subtotal=subtotal,
        taxes=taxes,
        total_amount=subtotal + taxes,
    )


def generate_reference() -> str:
    return f"{REFERENCE_PREFIX}{uuid.uuid4().hex[:8].upper()}"


class BookingService:
    """Owns the booking state machine and the race-free creation path.

    ``notify`` sends the confirmation email; ``schedule`` defers a call (the
    HTTP layer passes ``BackgroundTasks.add_task``). Without a scheduler the
    notification runs inline. Either way its failure never reaches the caller.
    """

    def __init__(
        self,
        db: Session,
        notify: Callable[..., Any] = send_booking_confirmation_email,
        schedule: Optional[Callable[..., Any]] = None,
        today: Callable[[], date] = date.today,
        tax_rate: Decimal = settings.TAX_RATE,
    ):
        self.db = db
        self.availability = AvailabilityService(db)
        self.notify = notify
        self.schedule = schedule
        self.today = today
        self.tax_rate = tax_rate

    # ==== Creation ====

    def create_booking(self, user_id: int, payload: BookingCreateIn) -> Booking:
        room = self.db.get(Room, payload.room_id)
        if not room or not room.is_active:
            raise NotFoundError("Room not found")
        hotel = self.db.get(Hotel, payload.hotel_id)
        if not hotel:
            raise NotFoundError("Hotel not found")
        if room.hotel_id != hotel.id:
            raise InvalidRequestError("Room does not belong to this hotel")

        check_in, check_out = payload.check_in, payload.check_out
        if check_in >= check_out:
            raise InvalidRequestError("Check-out must be after check-in")
        if check_in < self.today():
            raise InvalidRequestError("Check-in cannot be in the past")
        if payload.adults > room.capacity_adults or payload.children > room.capacity_children:
            raise InvalidRequestError("Party size exceeds room capacity")

        # Serializes creation per room where the backend supports row locks
        self._lock_room(room.id)
        if not self.availability.is_available(room.id, check_in, check_out):
            self.db.rollback()
            logger.info("Rejected booking for room %s %s..%s: dates taken", room.id, check_in, check_out)
            raise BookingConflictError()

        pricing = compute_pricing(room, check_in, check_out, self.tax_rate)
        guest = payload.guest_info
        booking = Booking(
            booking_reference=self._unique_reference(),
            user_id=user_id,
            hotel_id=hotel.id,
            room_id=room.id,
            check_in=check_in,
            check_out=check_out,
            adults=payload.adults,
            children=payload.children,
            nights=pricing.nights,
            price_per_night=pricing.price_per_night,
            subtotal=pricing.subtotal,
            taxes=pricing.taxes,
            total_amount=pricing.total_amount,
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            payment_method=payload.payment_method,
            guest_first_name=guest.first_name.strip(),
            guest_last_name=guest.last_name.strip(),
            guest_email=str(guest.email).lower(),
            guest_phone=guest.phone.strip(),
            special_requests=(payload.special_requests or "").strip() or None,
        )
        self.db.add(booking)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Booking reference collision for room %s", room.id)
            raise ConflictError("Could not allocate a booking reference, please retry")
        self.db.refresh(booking)

        # A concurrent request may have committed an overlapping stay between
        # our check and our commit. Whichever booking re-checks second sees the
        # other one and backs out.
        if not self.availability.is_available(room.id, check_in, check_out, exclude_booking_id=booking.id):
            logger.warning("Concurrent overlap on room %s, withdrawing booking %s", room.id, booking.booking_reference)
            self.db.delete(booking)
            self.db.commit()
            raise BookingConflictError()

        logger.info(
            "Booking %s created: room=%s %s..%s total=%s",
            booking.booking_reference, room.id, check_in, check_out, booking.total_amount,
        )
        self._dispatch_confirmation(booking, hotel)
        return booking

    def _lock_room(self, room_id: int) -> None:
        # FOR UPDATE is a no-op on SQLite; the post-commit re-check covers it
        self.db.query(Room.id).filter(Room.id == room_id).with_for_update().one()

    def _unique_reference(self) -> str:
        for _ in range(MAX_REFERENCE_ATTEMPTS):
            reference = generate_reference()
            taken = self.db.query(Booking.id).filter(Booking.booking_reference == reference).first()
            if not taken:
                return reference
        raise ConflictError("Could not allocate a booking reference, please retry")

    def _dispatch_confirmation(self, booking: Booking, hotel: Hotel) -> None:
        args = (
            booking.guest_email,
            booking.booking_reference,
            booking.guest_name,
            booking.check_in,
            booking.check_out,
            hotel.name,
            booking.total_amount,
        )
        try:
            if self.schedule is not None:
                self.schedule(self._notify_safely, *args)
            else:
                self._notify_safely(*args)
        except Exception:
            logger.exception("Could not dispatch confirmation for booking %s", booking.booking_reference)

    def _notify_safely(self, *args) -> None:
        try:
            self.notify(*args)
        except Exception:
            logger.exception("Confirmation email for booking %s failed", args[1])

    # ==== Transitions ====

    def update_status(self, booking_id: int, payload: BookingStatusUpdateIn, actor_id: int, actor_role: str) -> Booking:
        booking = self._get(booking_id)
        target = BookingStatus(payload.status)

        if not is_admin_role(actor_role):
            if booking.user_id != actor_id:
                raise ForbiddenError()
            if target != BookingStatus.CANCELLED:
                raise ForbiddenError("Guests can only cancel bookings")
            if booking.status not in GUEST_CANCELLABLE:
                raise InvalidRequestError(f"A {booking.status.value} booking cannot be cancelled")
        if booking.status in TERMINAL_STATUSES:
            raise InvalidRequestError(f"Booking is already {booking.status.value}")

        now = datetime.utcnow()
        previous = booking.status
        booking.status = target
        if target == BookingStatus.CANCELLED:
            booking.cancellation_reason = payload.reason
            if booking.cancelled_at is None:
                booking.cancelled_at = now
        elif target == BookingStatus.CHECKED_IN:
            if booking.checked_in_at is None:
                booking.checked_in_at = now
        elif target == BookingStatus.CHECKED_OUT:
            if booking.checked_out_at is None:
                booking.checked_out_at = now
        self.db.commit()
        self.db.refresh(booking)
        logger.info(
            "Booking %s: %s -> %s by user %s (%s)",
            booking.booking_reference, previous.value, target.value, actor_id, actor_role,
        )
        return booking

    def cancel(self, booking_id: int, actor_id: int, actor_role: str, reason: str | None = None) -> Booking:
        return self.update_status(
            booking_id,
            BookingStatusUpdateIn(status=BookingStatus.CANCELLED, reason=reason),
            actor_id,
            actor_role,
        )

    def update_payment_status(self, booking_id: int, payload: PaymentStatusUpdateIn) -> Booking:
        booking = self._get(booking_id)
        booking.payment_status = PaymentStatus(payload.payment_status)
        if payload.payment_intent_id:
            booking.payment_intent_id = payload.payment_intent_id
        if booking.payment_status == PaymentStatus.PAID and booking.status == BookingStatus.PENDING:
            booking.status = BookingStatus.CONFIRMED
        self.db.commit()
        self.db.refresh(booking)
        logger.info("Booking %s payment status set to %s", booking.booking_reference, booking.payment_status.value)
        return booking

    # ==== Reads ====

    def _get(self, booking_id: int) -> Booking:
        booking = self.db.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    @staticmethod
    def _check_access(booking: Booking, actor_id: int, actor_role: str) -> None:
        if not is_admin_role(actor_role) and booking.user_id != actor_id:
            raise ForbiddenError()

    def get_by_id(self, booking_id: int, actor_id: int, actor_role: str) -> Booking:
        booking = self._get(booking_id)
        self._check_access(booking, actor_id, actor_role)
        return booking

    def get_by_reference(self, reference: str, actor_id: int, actor_role: str) -> Booking:
        booking = self.db.query(Booking).filter(Booking.booking_reference == reference.strip().upper()).first()
        if not booking:
            raise NotFoundError("Booking not found")
        self._check_access(booking, actor_id, actor_role)
        return booking

    def list_for_user(self, user_id: int, page: int = 1, limit: int = 10) -> dict:
        q = (
            self.db.query(Booking)
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return paginate(q, page, limit)

    def list_all(self, status: BookingStatus | None = None, page: int = 1, limit: int = 10) -> dict:
        q = self.db.query(Booking)
        if status:
            q = q.filter(Booking.status == status)
        return paginate(q.order_by(Booking.created_at.desc(), Booking.id.desc()), page, limit)
