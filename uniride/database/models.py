import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Flexibility(str, enum.Enum):
    STRICT = "strict"
    MODERATE = "moderate"
    FLEXIBLE = "flexible"


class RideStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    college = Column(String, nullable=False, index=True)
    gender = Column(String, nullable=True)
    graduation_year = Column(Integer, nullable=True)
    role = Column(String, nullable=False, default=Role.USER.value)
    created_at = Column(DateTime, default=utcnow)

    rides = relationship("Ride", back_populates="owner")


class Ride(Base):
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    location = Column(String, nullable=False)
    direction = Column(String, nullable=False)
    departure_time = Column(DateTime, nullable=False, index=True)
    flexibility = Column(String, nullable=False)
    status = Column(String, nullable=False, default=RideStatus.ACTIVE.value)
    created_at = Column(DateTime, default=utcnow)

    owner = relationship("User", back_populates="rides", lazy="joined")
