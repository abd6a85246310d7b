# app/schemas/review.py
from pydantic import BaseModel, Field, conint
from typing import Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: str = Field(..., min_length=1)


class ReviewResponse(BaseModel):
    id: int
    rating: int
    comment: str
    author_id: int
    author_name: Optional[str] = None
    service_id: int
    created_at: datetime

    class Config:
        from_attributes = True
