import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from uniride.config import settings
from uniride.security import get_password_hash
from .models import User, Ride, RideStatus, Role

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when an email is already registered."""


# Users


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lowercased, so lookups ignore case."""
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def role_for_email(email: str) -> str:
    if normalize_email(email) == normalize_email(settings.ADMIN_EMAIL):
        return Role.ADMIN.value
    return Role.USER.value


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str,
    college: str,
    gender: Optional[str] = None,
    graduation_year: Optional[int] = None
) -> User:
    email = normalize_email(email)
    db_user = User(
        email=email,
        hashed_password=get_password_hash(password),
        name=name,
        college=college,
        gender=gender,
        graduation_year=graduation_year,
        role=role_for_email(email)
    )
    try:
        db.add(db_user)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # the unique index on users.email settles concurrent registrations
        if get_user_by_email(db, email) is not None:
            logger.info(f"Registration lost a race for {email}")
            raise DuplicateEmailError(email) from e
        raise
    db.refresh(db_user)
    return db_user


def update_user(
    db: Session,
    user_id: int,
    name: str,
    college: str,
    gender: Optional[str],
    graduation_year: Optional[int]
) -> bool:
    updated = db.query(User).filter(User.id == user_id).update(
        {
            User.name: name,
            User.college: college,
            User.gender: gender,
            User.graduation_year: graduation_year,
        },
        synchronize_session=False
    )
    db.commit()
    return updated > 0


def get_all_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


# Rides


def create_ride(
    db: Session,
    user_id: int,
    location: str,
    direction: str,
    departure_time,
    flexibility: str
) -> Ride:
    db_ride = Ride(
        user_id=user_id,
        location=location,
        direction=direction,
        departure_time=departure_time,
        flexibility=flexibility,
        status=RideStatus.ACTIVE.value
    )
    try:
        db.add(db_ride)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Could not create ride for user {user_id}: {e}")
        raise
    db.refresh(db_ride)
    return db_ride


def get_ride(db: Session, ride_id: int) -> Optional[Ride]:
    return db.query(Ride).filter(Ride.id == ride_id).first()


def get_user_rides(db: Session, user_id: int) -> List[Ride]:
    return (
        db.query(Ride)
        .filter(Ride.user_id == user_id, Ride.status == RideStatus.ACTIVE.value)
        .order_by(Ride.departure_time.asc())
        .all()
    )


def get_college_rides(db: Session, college: str) -> List[Ride]:
    return (
        db.query(Ride)
        .join(Ride.owner)
        .filter(User.college == college, Ride.status == RideStatus.ACTIVE.value)
        .order_by(Ride.departure_time.asc())
        .all()
    )


def find_rides(db: Session, *criteria) -> List[Ride]:
    """Rides joined with their owner, filtered by `criteria`, earliest first."""
    return (
        db.query(Ride)
        .join(Ride.owner)
        .filter(*criteria)
        .order_by(Ride.departure_time.asc(), Ride.id.asc())
        .all()
    )


def get_all_rides(db: Session) -> List[Ride]:
    return db.query(Ride).order_by(Ride.created_at.desc(), Ride.id.desc()).all()


def _owned_ride(db: Session, ride_id: int, owner_id: int):
    return db.query(Ride).filter(Ride.id == ride_id, Ride.user_id == owner_id)


def update_ride(
    db: Session,
    ride_id: int,
    owner_id: int,
    location: str,
    direction: str,
    departure_time,
    flexibility: str
) -> bool:
    """
    Update a ride's editable fields if `owner_id` owns it.

    Returns False when no ride with that id belongs to the owner.
    """
    updated = _owned_ride(db, ride_id, owner_id).update(
        {
            Ride.location: location,
            Ride.direction: direction,
            Ride.departure_time: departure_time,
            Ride.flexibility: flexibility,
        },
        synchronize_session=False
    )
    db.commit()
    return updated > 0


def update_ride_status(db: Session, ride_id: int, owner_id: int, status: str) -> bool:
    updated = _owned_ride(db, ride_id, owner_id).update(
        {Ride.status: status}, synchronize_session=False
    )
    db.commit()
    return updated > 0


def delete_ride(db: Session, ride_id: int, owner_id: int) -> bool:
    deleted = _owned_ride(db, ride_id, owner_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0
