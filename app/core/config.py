# app/core/config.py
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class Settings(BaseModel):
    """Runtime configuration read from the environment (and `.env`)."""

    model_config = ConfigDict(extra="ignore")

    PROJECT_NAME: str = "Services Marketplace API"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = "sqlite:///./marketplace.db"

    # leaderboard: trailing window and size
    RANKING_WINDOW_DAYS: int = Field(30, gt=0)
    RANKING_TOP_N: int = Field(3, gt=0)

    REVIEW_MIN_COMMENT_LENGTH: int = Field(10, ge=1)


def load_settings(*, load_env: bool = True) -> Settings:
    if load_env:
        load_dotenv()

    try:
        return Settings.model_validate(dict(os.environ))
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
