# app/api/routes/review.py
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_store
from app.core.config import get_settings
from app.core.security import get_current_user
from app.db.models.service import ApprovalStatus
from app.db.models.user import User
from app.db.store import EntityStore
from app.schemas.review import ReviewCreate, ReviewResponse
from app.services.transformer import review_view

router = APIRouter(prefix="/services/{service_id}/reviews", tags=["reviews"])


# Create review (any signed-in user except the service's provider)
@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    service_id: int,
    review_in: ReviewCreate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    review = store.create_review(
        service_id=service_id,
        author=current_user,
        rating=review_in.rating,
        comment=review_in.comment,
        min_comment_length=get_settings().REVIEW_MIN_COMMENT_LENGTH,
    )
    return review_view(review)


# List reviews for an approved service (public), newest first
@router.get("", response_model=list[ReviewResponse])
def list_service_reviews(service_id: int, store: EntityStore = Depends(get_store)):
    service = store.get_service(service_id)
    if not service or service.approval_status != ApprovalStatus.APPROVED:
        raise HTTPException(status_code=404, detail="Service not found")

    reviews = store.find_reviews(service_id=service_id)
    return [review_view(r) for r in reversed(reviews)]
