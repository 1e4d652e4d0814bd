"""
Ride matching.

A ride matches a requester when it belongs to another user of the same
college, leaves from the same location in the same direction, is still
active, and departs inside a time window. The window is either built around
a reference departure time from a flexibility setting, or given explicitly
as a start/end range. Results are ordered by departure time, earliest first.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List

from sqlalchemy.orm import Session

from uniride.database import crud
from uniride.database.models import Flexibility, Ride, RideStatus, User

TOLERANCE_HOURS = {
    Flexibility.STRICT.value: 1,
    Flexibility.MODERATE.value: 3,
}
DEFAULT_TOLERANCE_HOURS = 6


class InvalidDateRangeError(ValueError):
    """Raised when a search range starts after it ends."""


def tolerance_hours(flexibility) -> int:
    if isinstance(flexibility, Flexibility):
        flexibility = flexibility.value
    return TOLERANCE_HOURS.get(flexibility, DEFAULT_TOLERANCE_HOURS)


@dataclass(frozen=True)
class MatchWindow:
    start: datetime
    end: datetime

    @classmethod
    def around(cls, departure_time: datetime, flexibility) -> "MatchWindow":
        tolerance = timedelta(hours=tolerance_hours(flexibility))
        return cls(departure_time - tolerance, departure_time + tolerance)

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "MatchWindow":
        if start > end:
            raise InvalidDateRangeError(
                "Start date must be before or equal to end date")
        return cls(start, end)

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def match_criteria(requester_id: int, college: str, location: str,
                   direction: str, window: MatchWindow) -> list:
    return [
        Ride.user_id != requester_id,
        User.college == college,
        Ride.location == location,
        Ride.direction == direction,
        Ride.departure_time.between(window.start, window.end),
        Ride.status == RideStatus.ACTIVE.value,
    ]


def find_matches(db: Session, requester_id: int, college: str, location: str,
                 direction: str, departure_time: datetime,
                 flexibility) -> List[Ride]:
    """Rides departing within the flexibility tolerance of `departure_time`."""
    if crud.get_user_by_id(db, requester_id) is None:
        return []
    window = MatchWindow.around(departure_time, flexibility)
    return crud.find_rides(
        db, *match_criteria(requester_id, college, location, direction, window))


def find_matches_in_range(db: Session, requester_id: int, college: str,
                          location: str, direction: str, start: datetime,
                          end: datetime) -> List[Ride]:
    window = MatchWindow.between(start, end)
    return crud.find_rides(
        db, *match_criteria(requester_id, college, location, direction, window))


def find_matches_for_ride(db: Session, ride: Ride) -> List[Ride]:
    return find_matches(
        db,
        requester_id=ride.user_id,
        college=ride.owner.college,
        location=ride.location,
        direction=ride.direction,
        departure_time=ride.departure_time,
        flexibility=ride.flexibility,
    )
