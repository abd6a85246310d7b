# app/services/ranking.py
"""
Top-N leaderboard of services by recent review activity.

Two independent phases:
  1. score and order the windowed aggregates (pure, see `rank_aggregates`);
  2. resolve the surviving ids against the store, keeping APPROVED services
     only (`resolve_ranked`).
A service that disappears or loses approval between the two phases is
dropped, so the result can be shorter than N.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Sequence

from app.core.errors import ValidationFailure
from app.db.models.service import ApprovalStatus
from app.schemas.service import TopServiceItem
from app.services.aggregator import ReviewAggregate, aggregate_reviews, window_start
from app.services.transformer import transform_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedAggregate:
    rank: int
    service_id: int
    score: float
    average_rating: float
    review_count: int


def rank_aggregates(aggregates: Sequence[ReviewAggregate], limit: int) -> list[RankedAggregate]:
    """Order aggregates by score, highest first, and keep the first `limit`.

    `sorted` is stable, so services with equal scores stay in aggregation order.
    """
    if limit <= 0:
        raise ValidationFailure("Rank count must be a positive integer")

    ordered = sorted(aggregates, key=lambda agg: agg.score, reverse=True)[:limit]
    return [
        RankedAggregate(
            rank=position,
            service_id=agg.service_id,
            score=agg.score,
            average_rating=agg.average_rating,
            review_count=agg.review_count,
        )
        for position, agg in enumerate(ordered, start=1)
    ]


def resolve_ranked(store, ranked: Sequence[RankedAggregate]) -> list[TopServiceItem]:
    if not ranked:
        return []

    services = store.find_services(
        ids=[r.service_id for r in ranked],
        approval_status=ApprovalStatus.APPROVED,
    )
    by_id = {svc.id: svc for svc in services}

    items = []
    for entry in ranked:
        service = by_id.get(entry.service_id)
        if service is None:
            logger.debug("Dropping ranked service %s: missing or not approved", entry.service_id)
            continue
        view = transform_service(service, service.provider)
        items.append(
            TopServiceItem(
                id=view.id,
                name=view.name,
                description=view.description,
                category=view.category,
                location=view.location,
                featured=view.featured,
                approval_status=view.approval_status,
                rating=entry.average_rating,
                review_count=entry.review_count,
                score=entry.score,
                rank=entry.rank,
                provider_name=view.provider_name,
                provider_phone=view.provider_phone,
            )
        )
    return items


class RankingEngine:
    def __init__(
        self,
        store,
        *,
        window: timedelta = timedelta(days=30),
        limit: int = 3,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.window = window
        self.limit = limit
        self.clock = clock

    def top_services(self) -> list[TopServiceItem]:
        # validate before touching the store
        now = self.clock()
        start = window_start(now, self.window)
        if self.limit <= 0:
            raise ValidationFailure("Rank count must be a positive integer")

        snapshot = self.store.find_reviews(created_after=start)
        aggregates = aggregate_reviews(snapshot, now, self.window)
        ranked = rank_aggregates(aggregates, self.limit)
        logger.debug("Ranked %d of %d aggregated services", len(ranked), len(aggregates))
        return resolve_ranked(self.store, ranked)
