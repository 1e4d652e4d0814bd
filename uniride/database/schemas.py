from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from uniride.config import COLLEGES
from uniride.service.timestamps import to_naive_utc
from .models import Flexibility, RideStatus


def _known_college(value: str) -> str:
    if value not in COLLEGES:
        raise ValueError("college must be one of the listed colleges or 'Other'")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    college: str
    gender: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, alias="graduationYear")

    class Config:
        populate_by_name = True

    @field_validator("college")
    @classmethod
    def check_college(cls, value: str) -> str:
        return _known_college(value)


class LoginRequest(BaseModel):
    email: str
    password: str


class AdminLoginRequest(BaseModel):
    password: str


class ProfileUpdate(BaseModel):
    name: str = Field(min_length=1)
    college: str
    gender: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, alias="graduationYear")

    class Config:
        populate_by_name = True

    @field_validator("college")
    @classmethod
    def check_college(cls, value: str) -> str:
        return _known_college(value)


class RideCreate(BaseModel):
    location: str = Field(min_length=1)
    direction: str = Field(min_length=1)
    departure_time: datetime = Field(alias="departureTime")
    flexibility: Flexibility

    class Config:
        populate_by_name = True

    @field_validator("departure_time")
    @classmethod
    def normalize_departure_time(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class RideUpdate(RideCreate):
    pass


class RideStatusUpdate(BaseModel):
    status: RideStatus


class SessionData(BaseModel):
    """What the session cookie carries between requests."""

    user_id: Optional[int] = None
    user_email: Optional[str] = None
    role: Optional[str] = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    college: str
    gender: Optional[str] = None
    graduation_year: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RideOut(BaseModel):
    id: int
    user_id: int
    location: str
    direction: str
    departure_time: datetime
    flexibility: str
    status: str
    created_at: Optional[datetime] = None
    # owner's public profile
    name: str
    college: str
    gender: Optional[str] = None
    graduation_year: Optional[int] = None

    @classmethod
    def from_ride(cls, ride, **extra):
        owner = ride.owner
        return cls(
            id=ride.id,
            user_id=ride.user_id,
            location=ride.location,
            direction=ride.direction,
            departure_time=ride.departure_time,
            flexibility=ride.flexibility,
            status=ride.status,
            created_at=ride.created_at,
            name=owner.name,
            college=owner.college,
            gender=owner.gender,
            graduation_year=owner.graduation_year,
            **extra
        )


class AdminRideOut(RideOut):
    email: str

    @classmethod
    def from_ride(cls, ride, **extra):
        return super().from_ride(ride, email=ride.owner.email, **extra)
