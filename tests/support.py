# Factories for seeding the test database directly, bypassing the API.

from datetime import datetime, timedelta
from itertools import count

from app.db.models.review import Review
from app.db.models.service import ApprovalStatus, Service
from app.db.models.user import Role, User

NOW = datetime(2026, 10, 19, 12, 0, 0)

_seq = count(1)


def make_user(db, name="Alice", role=Role.USER, phone=None, email=None):
    user = User(name=name, role=role, phone=phone, email=email or f"user{next(_seq)}@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_service(db, provider, name="Plumbing", status=ApprovalStatus.APPROVED, **fields):
    fields.setdefault("description", f"{name} done right")
    fields.setdefault("category", "Home")
    service = Service(provider_id=provider.id, name=name, approval_status=status, **fields)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def make_review(db, author, service, rating=5, days_ago=1, comment="Great work, on time", now=NOW):
    review = Review(
        author_id=author.id,
        service_id=service.id,
        rating=rating,
        comment=comment,
        created_at=now - timedelta(days=days_ago),
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def auth(user):
    return {"X-User-Id": str(user.id)}
