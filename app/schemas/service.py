# app/schemas/service.py

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.db.models.service import ApprovalStatus
from app.schemas.review import ReviewResponse


# Shared fields
class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    location: Optional[str] = None
    video_url: Optional[str] = None


# Provider creates service
class ServiceCreate(ServiceBase):
    pass


# Provider updates service
class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    video_url: Optional[str] = None


class FeaturedUpdate(BaseModel):
    featured: bool


# What API returns: service flattened with its provider's public contact
class ServiceView(BaseModel):
    id: int
    name: str
    description: str
    category: str
    location: Optional[str] = None
    video_url: Optional[str] = None
    rating: float
    review_count: int
    featured: bool
    approval_status: ApprovalStatus
    provider_id: int
    created_at: datetime

    provider_name: str
    provider_phone: Optional[str] = None

    reviews: Optional[list[ReviewResponse]] = None


# Leaderboard entry
class TopServiceItem(BaseModel):
    id: int
    name: str
    description: str
    category: str
    location: Optional[str] = None
    featured: bool
    approval_status: ApprovalStatus
    rating: float
    review_count: int
    score: float
    rank: int
    provider_name: str
    provider_phone: Optional[str] = None
