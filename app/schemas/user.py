from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.db.models.user import Role


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: Role = Role.USER
    phone: Optional[str] = None

    @field_validator("role")
    @classmethod
    def no_self_registered_admins(cls, value: Role) -> Role:
        # admins are promoted by another admin, never registered
        if value == Role.ADMIN:
            raise ValueError("role must be USER or PROVIDER")
        return value


class UserResponse(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: Role
    phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
