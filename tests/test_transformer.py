from datetime import datetime

from app.db.models.service import ApprovalStatus, Service
from app.db.models.user import Role, User
from app.schemas.review import ReviewResponse
from app.services.transformer import PROVIDER_NAME_PLACEHOLDER, transform_service

CREATED = datetime(2026, 9, 1, 8, 30)


def _service(**overrides):
    fields = dict(
        id=7,
        name="Piano lessons",
        description="Beginner to advanced",
        category="Education",
        location=None,
        video_url=None,
        rating=4.5,
        review_count=2,
        featured=True,
        approval_status=ApprovalStatus.APPROVED,
        provider_id=3,
        created_at=CREATED,
    )
    fields.update(overrides)
    return Service(**fields)


def _provider(**overrides):
    fields = dict(id=3, name="Dana", email="dana@example.com", role=Role.PROVIDER, phone="555-0199")
    fields.update(overrides)
    return User(**fields)


def test_flattens_provider_name_and_phone() -> None:
    view = transform_service(_service(), _provider())

    assert view.provider_name == "Dana"
    assert view.provider_phone == "555-0199"
    assert view.reviews is None
    assert view.rating == 4.5
    assert view.featured is True


def test_missing_phone_becomes_none() -> None:
    view = transform_service(_service(), _provider(phone=None))

    assert view.provider_phone is None


def test_missing_provider_uses_placeholder() -> None:
    view = transform_service(_service(), None)

    assert view.provider_name == PROVIDER_NAME_PLACEHOLDER
    assert view.provider_phone is None


def test_does_not_leak_other_provider_fields() -> None:
    payload = transform_service(_service(), _provider()).model_dump()

    assert "email" not in payload
    assert "provider" not in payload
    assert "dana@example.com" not in payload.values()


def test_reviews_pass_through_in_caller_order() -> None:
    reviews = [
        ReviewResponse(id=2, rating=3, comment="Okay lesson", author_id=9, service_id=7, created_at=CREATED),
        ReviewResponse(id=1, rating=5, comment="Wonderful tutor", author_id=8, service_id=7, created_at=datetime(2026, 9, 5)),
    ]

    view = transform_service(_service(), _provider(), reviews)

    assert [r.id for r in view.reviews] == [2, 1]
    assert view.reviews[0] == reviews[0]


def test_empty_review_list_is_kept() -> None:
    view = transform_service(_service(), _provider(), [])

    assert view.reviews == []


def test_unset_cached_counters_default_to_zero() -> None:
    view = transform_service(_service(review_count=None, rating=None), _provider())

    assert view.review_count == 0
    assert view.rating == 0.0
