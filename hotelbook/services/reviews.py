import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import paginate
from ..errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from ..models import Booking, BookingStatus, Hotel, Review
from ..schemas import ReviewApprovalIn, ReviewCreateIn, ReviewResponseIn

logger = logging.getLogger(__name__)


def recompute_hotel_rating(db: Session, hotel_id: int) -> Hotel | None:
    """Refresh a hotel's average rating and review count from its approved reviews.

    The caller owns the transaction; this only flushes.
    """
    hotel = db.get(Hotel, hotel_id)
    if not hotel:
        return None
    avg, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.hotel_id == hotel_id, Review.is_approved == True)  # noqa: E712
        .one()
    )
    hotel.average_rating = float(Decimal(str(avg)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)) if count else 0
    hotel.total_reviews = count or 0
    db.flush()
    logger.info("Hotel %s rating recomputed: %s from %d review(s)", hotel_id, hotel.average_rating, hotel.total_reviews)
    return hotel


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def create_review(self, user_id: int, payload: ReviewCreateIn) -> Review:
        booking = self.db.get(Booking, payload.booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.user_id != user_id:
            raise ForbiddenError("You can only review your own bookings")
        if booking.status != BookingStatus.CHECKED_OUT:
            raise InvalidRequestError("You can only review after check-out")
        if self._already_reviewed(booking.id):
            raise ConflictError("You have already reviewed this booking")

        review = Review(
            user_id=user_id,
            hotel_id=booking.hotel_id,
            is_verified=True,
            **payload.model_dump(),
        )
        self.db.add(review)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent review of the same booking won the unique booking_id
            self.db.rollback()
            raise ConflictError("You have already reviewed this booking")
        self.db.refresh(review)
        return review

    def _already_reviewed(self, booking_id: int) -> bool:
        return self.db.query(Review.id).filter(Review.booking_id == booking_id).first() is not None

    def _get(self, review_id: int) -> Review:
        review = self.db.get(Review, review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    def list_hotel_reviews(self, hotel_id: int, page: int = 1, limit: int = 10) -> dict:
        q = (
            self.db.query(Review)
            .filter(Review.hotel_id == hotel_id, Review.is_approved == True)  # noqa: E712
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return paginate(q, page, limit)

    def list_all(self, approved: bool | None = None, page: int = 1, limit: int = 10) -> dict:
        q = self.db.query(Review)
        if approved is not None:
            q = q.filter(Review.is_approved == approved)
        return paginate(q.order_by(Review.created_at.desc(), Review.id.desc()), page, limit)

    def approve(self, review_id: int, payload: ReviewApprovalIn) -> Review:
        review = self._get(review_id)
        review.is_approved = payload.approved
        self.db.flush()
        recompute_hotel_rating(self.db, review.hotel_id)
        self.db.commit()
        self.db.refresh(review)
        return review

    def respond(self, review_id: int, payload: ReviewResponseIn, admin_id: int) -> Review:
        review = self._get(review_id)
        review.response_text = payload.text
        review.responded_at = datetime.utcnow()
        review.responded_by = admin_id
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete(self, review_id: int) -> None:
        review = self._get(review_id)
        hotel_id = review.hotel_id
        self.db.delete(review)
        self.db.flush()
        recompute_hotel_rating(self.db, hotel_id)
        self.db.commit()
