# app/api/deps.py
from datetime import timedelta

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.base import get_db
from app.db.store import EntityStore
from app.services.cascade import CascadeDeletionManager
from app.services.ranking import RankingEngine


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_ranking_engine(store: EntityStore = Depends(get_store)) -> RankingEngine:
    settings = get_settings()
    return RankingEngine(
        store,
        window=timedelta(days=settings.RANKING_WINDOW_DAYS),
        limit=settings.RANKING_TOP_N,
    )


def get_cascade_manager(store: EntityStore = Depends(get_store)) -> CascadeDeletionManager:
    return CascadeDeletionManager(store)
