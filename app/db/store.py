# app/db/store.py
"""
Entity store: every query and mutation the marketplace core needs, on top of
one request-scoped SQLAlchemy session.

Plain writes (create/update) commit on their own. The delete_* methods are
transaction steps: they only flush, and are meant to be composed with
`run_transaction`, which commits all of them or none.
"""
import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import (
    ConflictError,
    MarketplaceError,
    NotFoundError,
    PermissionDenied,
    TransactionFailure,
    ValidationFailure,
)
from app.db.models.review import Review
from app.db.models.service import ApprovalStatus, Service
from app.db.models.user import Role, User
from app.services.aggregator import ReviewAggregate

logger = logging.getLogger(__name__)


class EntityStore:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------
    # Users
    # -------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def list_users(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def create_user(self, *, email: str, name: str, role: Role = Role.USER, phone: Optional[str] = None) -> User:
        existing = self.db.query(User).filter(User.email == email).first()
        if existing:
            raise ConflictError("Email already registered")

        user = User(email=email, name=name, role=role, phone=phone)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_user_role(self, user_id: int, role: Role) -> User:
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        user.role = role
        self.db.commit()
        self.db.refresh(user)
        return user

    # -------------------------
    # Services
    # -------------------------
    def get_service(self, service_id: int, *, with_reviews: bool = False) -> Optional[Service]:
        q = self.db.query(Service).options(joinedload(Service.provider))
        if with_reviews:
            q = q.options(joinedload(Service.reviews).joinedload(Review.author))
        return q.filter(Service.id == service_id).first()

    def find_services(
        self,
        *,
        ids: Optional[Sequence[int]] = None,
        approval_status: Optional[ApprovalStatus] = None,
        provider_id: Optional[int] = None,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        order_by: str = "newest",
    ) -> list[Service]:
        """Services joined with their provider, filtered by whatever is given."""
        if ids is not None and not ids:
            return []

        q = self.db.query(Service).options(joinedload(Service.provider))
        if ids is not None:
            q = q.filter(Service.id.in_(list(ids)))
        if approval_status is not None:
            q = q.filter(Service.approval_status == approval_status)
        if provider_id is not None:
            q = q.filter(Service.provider_id == provider_id)
        if category:
            q = q.filter(Service.category == category)
        if featured is not None:
            q = q.filter(Service.featured == featured)
        if search:
            q_like = f"%{search.strip()}%"
            q = q.filter(
                or_(
                    Service.name.ilike(q_like),
                    Service.description.ilike(q_like),
                    Service.category.ilike(q_like),
                )
            )

        if order_by == "rating":
            q = q.order_by(Service.rating.desc(), Service.id)
        else:
            q = q.order_by(Service.created_at.desc(), Service.id.desc())
        return q.all()

    def create_service(self, provider: User, **fields) -> Service:
        if provider.role not in (Role.PROVIDER, Role.ADMIN):
            raise PermissionDenied("Only providers can create services")

        service = Service(
            provider_id=provider.id,
            rating=0.0,
            review_count=0,
            featured=False,
            approval_status=ApprovalStatus.PENDING,
            **fields,
        )
        self.db.add(service)
        self.db.commit()
        return self.get_service(service.id)

    def update_service(self, service: Service, **fields) -> Service:
        for field, value in fields.items():
            setattr(service, field, value)
        # any provider edit goes back through moderation
        service.approval_status = ApprovalStatus.PENDING
        self.db.commit()
        self.db.refresh(service)
        return service

    def set_approval_status(self, service_id: int, status: ApprovalStatus) -> Service:
        service = self.get_service(service_id)
        if not service:
            raise NotFoundError("Service", service_id)
        service.approval_status = status
        self.db.commit()
        self.db.refresh(service)
        return service

    def set_featured(self, service_id: int, featured: bool) -> Service:
        service = self.get_service(service_id)
        if not service:
            raise NotFoundError("Service", service_id)
        service.featured = featured
        self.db.commit()
        self.db.refresh(service)
        return service

    # -------------------------
    # Reviews
    # -------------------------
    def find_reviews(
        self,
        *,
        service_id: Optional[int] = None,
        author_id: Optional[int] = None,
        created_after: Optional[datetime] = None,
    ) -> list[Review]:
        """Reviews matching every given filter, oldest first."""
        q = self.db.query(Review)
        if service_id is not None:
            q = q.filter(Review.service_id == service_id)
        if author_id is not None:
            q = q.filter(Review.author_id == author_id)
        if created_after is not None:
            q = q.filter(Review.created_at >= created_after)
        return q.order_by(Review.created_at, Review.id).all()

    def group_reviews_by_service(
        self,
        *,
        created_after: Optional[datetime] = None,
        service_ids: Optional[Sequence[int]] = None,
    ) -> list[ReviewAggregate]:
        q = self.db.query(
            Review.service_id,
            func.sum(Review.rating).label("rating_total"),
            func.count(Review.id).label("cnt"),
        )
        if created_after is not None:
            q = q.filter(Review.created_at >= created_after)
        if service_ids is not None:
            q = q.filter(Review.service_id.in_(list(service_ids)))
        rows = q.group_by(Review.service_id).order_by(func.min(Review.created_at), Review.service_id).all()
        return [
            ReviewAggregate(service_id=service_id, rating_total=int(rating_total), review_count=int(cnt))
            for service_id, rating_total, cnt in rows
        ]

    def refresh_service_rating(self, service_ids: Sequence[int]) -> None:
        """Recompute the cached rating/review_count of the given services (no commit)."""
        if not service_ids:
            return
        aggregates = {a.service_id: a for a in self.group_reviews_by_service(service_ids=service_ids)}
        for service_id in service_ids:
            agg = aggregates.get(service_id)
            self.db.query(Service).filter(Service.id == service_id).update(
                {
                    Service.rating: agg.average_rating if agg else 0.0,
                    Service.review_count: agg.review_count if agg else 0,
                },
                synchronize_session="fetch",
            )

    def create_review(
        self,
        *,
        service_id: int,
        author: User,
        rating: int,
        comment: str,
        min_comment_length: int = 1,
    ) -> Review:
        comment = comment.strip()
        if len(comment) < min_comment_length:
            raise ValidationFailure(f"Comment must be at least {min_comment_length} characters long")

        service = self.get_service(service_id)
        if not service or service.approval_status != ApprovalStatus.APPROVED:
            raise NotFoundError("Service", service_id)
        if service.provider_id == author.id:
            raise ConflictError("You cannot review your own service")

        existing = (
            self.db.query(Review)
            .filter(Review.service_id == service_id, Review.author_id == author.id)
            .first()
        )
        if existing:
            raise ConflictError("You have already reviewed this service")

        review = Review(service_id=service_id, author_id=author.id, rating=rating, comment=comment)
        self.db.add(review)
        try:
            self.db.flush()
            self.refresh_service_rating([service_id])
            self.db.commit()
        except IntegrityError as exc:
            # lost a race: duplicate review, or the service was deleted meanwhile
            self.db.rollback()
            raise ConflictError("Review could not be saved") from exc

        self.db.refresh(review)
        return review

    # -------------------------
    # Transaction steps (flush only)
    # -------------------------
    def lock_service(self, service_id: int) -> Service:
        service = self.db.query(Service).filter(Service.id == service_id).with_for_update().first()
        if not service:
            raise NotFoundError("Service", service_id)
        return service

    def lock_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).with_for_update().first()
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def delete_reviews(
        self,
        *,
        service_ids: Optional[Sequence[int]] = None,
        author_id: Optional[int] = None,
    ) -> int:
        if service_ids is None and author_id is None:
            raise ValidationFailure("delete_reviews needs a filter")
        if service_ids is not None and not service_ids:
            return 0

        q = self.db.query(Review)
        if service_ids is not None:
            q = q.filter(Review.service_id.in_(list(service_ids)))
        if author_id is not None:
            q = q.filter(Review.author_id == author_id)
        return q.delete(synchronize_session="fetch")

    def delete_service(self, service_id: int) -> Service:
        service = self.db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise NotFoundError("Service", service_id)
        self.db.query(Service).filter(Service.id == service_id).delete(synchronize_session="fetch")
        return service

    def delete_services_by_provider(self, provider_id: int) -> int:
        return self.db.query(Service).filter(Service.provider_id == provider_id).delete(synchronize_session="fetch")

    def delete_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User", user_id)
        self.db.query(User).filter(User.id == user_id).delete(synchronize_session="fetch")
        return user

    def run_transaction(self, steps: Sequence[Callable[[], object]]) -> list:
        """Run `steps` in order and commit once; roll everything back if any step fails."""
        results = []
        try:
            for step in steps:
                results.append(step())
            self.db.commit()
        except MarketplaceError:
            self.db.rollback()
            raise
        except Exception as exc:
            self.db.rollback()
            logger.error("Transaction rolled back after %d of %d steps: %s", len(results), len(steps), exc)
            raise TransactionFailure("Operation failed and was rolled back") from exc
        return results
