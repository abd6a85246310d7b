# app/services/aggregator.py
"""
Windowed review aggregation.

Groups a snapshot of reviews by service and reports the average rating and
review count of the reviews that fall inside a trailing time window. Pure:
the caller supplies both the snapshot and the clock.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from app.core.errors import ValidationFailure


@dataclass(frozen=True)
class ReviewAggregate:
    service_id: int
    rating_total: int
    review_count: int

    @property
    def average_rating(self) -> float:
        return self.rating_total / self.review_count

    @property
    def score(self) -> float:
        # volume-weighted: average * count is exactly the rating total,
        # kept integral so equal scores compare equal
        return float(self.rating_total)


def window_start(now: datetime, window: timedelta) -> datetime:
    if not isinstance(window, timedelta) or window <= timedelta(0):
        raise ValidationFailure("Aggregation window must be a positive duration")
    return now - window


def aggregate_reviews(reviews: Iterable, now: datetime, window: timedelta) -> list[ReviewAggregate]:
    """Aggregate `reviews` that were created within [now - window, now].

    Only `service_id`, `rating` and `created_at` are read from each review.
    Services appear in the order their first qualifying review appears in
    `reviews`; services with no qualifying review are absent.
    """
    start = window_start(now, window)

    totals: dict[int, list[int]] = {}
    for review in reviews:
        if not (start <= review.created_at <= now):
            continue
        bucket = totals.setdefault(review.service_id, [0, 0])
        bucket[0] += review.rating
        bucket[1] += 1

    return [
        ReviewAggregate(service_id=service_id, rating_total=total, review_count=count)
        for service_id, (total, count) in totals.items()
    ]
