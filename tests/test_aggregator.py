from datetime import timedelta
from types import SimpleNamespace

import pytest

from app.core.errors import ValidationFailure
from app.services.aggregator import ReviewAggregate, aggregate_reviews
from tests.support import NOW

WINDOW = timedelta(days=30)


def _review(service_id, rating, days_ago):
    return SimpleNamespace(service_id=service_id, rating=rating, created_at=NOW - timedelta(days=days_ago))


def test_two_recent_reviews_average_and_count() -> None:
    reviews = [_review("A", 5, 10), _review("A", 3, 10)]

    result = aggregate_reviews(reviews, NOW, WINDOW)

    assert result == [ReviewAggregate(service_id="A", rating_total=8, review_count=2)]
    assert result[0].score == 8.0


def test_reviews_outside_window_are_ignored() -> None:
    reviews = [_review("A", 1, 45), _review("A", 5, 2), _review("B", 5, 31)]

    result = aggregate_reviews(reviews, NOW, WINDOW)

    assert result == [ReviewAggregate(service_id="A", rating_total=5, review_count=1)]


def test_services_without_qualifying_reviews_are_absent() -> None:
    reviews = [_review("old", 4, 90), _review("future", 4, -1)]

    assert aggregate_reviews(reviews, NOW, WINDOW) == []
    assert aggregate_reviews([], NOW, WINDOW) == []


def test_window_bounds_are_inclusive() -> None:
    reviews = [_review("edge", 2, 30), _review("edge", 4, 0)]

    result = aggregate_reviews(reviews, NOW, WINDOW)

    assert result == [ReviewAggregate(service_id="edge", rating_total=6, review_count=2)]


def test_output_follows_first_appearance_order() -> None:
    reviews = [_review("B", 3, 20), _review("A", 5, 15), _review("B", 4, 5), _review("C", 2, 1)]

    result = aggregate_reviews(reviews, NOW, WINDOW)

    assert [agg.service_id for agg in result] == ["B", "A", "C"]
    assert all(agg.review_count > 0 for agg in result)


@pytest.mark.parametrize("window", [timedelta(0), timedelta(days=-1), 30])
def test_rejects_malformed_window(window) -> None:
    with pytest.raises(ValidationFailure):
        aggregate_reviews([_review("A", 5, 1)], NOW, window)
