from typing import Optional

from fastapi import APIRouter, Depends

from ..models import User
from ..schemas import MessageOut, PageOut, ReviewApprovalIn, ReviewCreateIn, ReviewOut, ReviewResponseIn
from ..deps import get_review_service
from ..security import require_admin, require_user
from ..services.reviews import ReviewService

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.post("", response_model=ReviewOut, status_code=201)
def create_review(payload: ReviewCreateIn, user: User = Depends(require_user), reviews: ReviewService = Depends(get_review_service)):
    return reviews.create_review(user.id, payload)


@router.get("/hotel/{hotel_id}", response_model=PageOut[ReviewOut])
def hotel_reviews(hotel_id: int, page: int = 1, limit: int = 10, reviews: ReviewService = Depends(get_review_service)):
    return reviews.list_hotel_reviews(hotel_id, page, limit)

# ==== Admin ====

@router.get("", response_model=PageOut[ReviewOut])
def all_reviews(approved: Optional[bool] = None, page: int = 1, limit: int = 10, admin: User = Depends(require_admin), reviews: ReviewService = Depends(get_review_service)):
    return reviews.list_all(approved, page, limit)


@router.patch("/{review_id}/approve", response_model=ReviewOut)
def approve_review(review_id: int, payload: ReviewApprovalIn, admin: User = Depends(require_admin), reviews: ReviewService = Depends(get_review_service)):
    return reviews.approve(review_id, payload)


@router.post("/{review_id}/respond", response_model=ReviewOut)
def respond_to_review(review_id: int, payload: ReviewResponseIn, admin: User = Depends(require_admin), reviews: ReviewService = Depends(get_review_service)):
    return reviews.respond(review_id, payload, admin.id)


@router.delete("/{review_id}", response_model=MessageOut)
def delete_review(review_id: int, admin: User = Depends(require_admin), reviews: ReviewService = Depends(get_review_service)):
    reviews.delete(review_id)
    return MessageOut(message="Review deleted")
