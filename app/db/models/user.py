# app/db/models/user.py
import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Role(str, enum.Enum):
    USER = "USER"
    PROVIDER = "PROVIDER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(Enum(Role, name="user_role", native_enum=False), nullable=False, default=Role.USER)

    phone = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # One-to-many with Service (as provider) and Review (as author)
    services = relationship("Service", back_populates="provider", passive_deletes=True)
    reviews = relationship("Review", back_populates="author", passive_deletes=True)
