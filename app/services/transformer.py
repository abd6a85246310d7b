# app/services/transformer.py
from typing import Optional, Sequence

from app.db.models.review import Review
from app.db.models.service import Service
from app.db.models.user import User
from app.schemas.review import ReviewResponse
from app.schemas.service import ServiceView

PROVIDER_NAME_PLACEHOLDER = "N/A"


def review_view(review: Review) -> ReviewResponse:
    author = review.author
    return ReviewResponse(
        id=review.id,
        rating=review.rating,
        comment=review.comment,
        author_id=review.author_id,
        author_name=author.name if author is not None else None,
        service_id=review.service_id,
        created_at=review.created_at,
    )


def transform_service(
    service: Service,
    provider: Optional[User],
    reviews: Optional[Sequence[ReviewResponse]] = None,
) -> ServiceView:
    """Flatten a service and its provider into the public view.

    Only the provider's name and phone are copied over. `reviews`, when
    given, are passed through as-is in the caller's order.
    """
    return ServiceView(
        id=service.id,
        name=service.name,
        description=service.description,
        category=service.category,
        location=service.location,
        video_url=service.video_url,
        rating=service.rating or 0.0,
        review_count=service.review_count or 0,
        featured=bool(service.featured),
        approval_status=service.approval_status,
        provider_id=service.provider_id,
        created_at=service.created_at,
        provider_name=(provider.name if provider is not None and provider.name else PROVIDER_NAME_PLACEHOLDER),
        provider_phone=(provider.phone if provider is not None and provider.phone else None),
        reviews=list(reviews) if reviews is not None else None,
    )
