import logging
from datetime import timedelta
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from uniride.database import crud
from uniride.database.base import get_db
from uniride.database.models import User
from uniride.database.schemas import (
    RideCreate, RideOut, RideStatusUpdate, RideUpdate, SessionData)
from uniride.dependencies import get_current_user, protected_route
from uniride.service.matching import (
    InvalidDateRangeError, MatchWindow, find_matches_for_ride,
    find_matches_in_range)
from uniride.service.timestamps import parse_timestamp

router = APIRouter(prefix="/api/rides", tags=["Rides"])

logger = logging.getLogger(__name__)


def _raise_not_owned(db: Session, ride_id: int):
    """A conditional write touched nothing: tell missing rides from foreign ones."""
    if crud.get_ride(db, ride_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ride not found"
        )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Not authorized"
    )


@router.post("")
async def create_ride(
    ride: RideCreate,
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    try:
        db_ride = crud.create_ride(
            db,
            user_id=session.user_id,
            location=ride.location,
            direction=ride.direction,
            departure_time=ride.departure_time,
            flexibility=ride.flexibility.value
        )
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create ride"
        )
    logger.info(f"User {session.user_id} posted ride {db_ride.id}")
    return {"success": True, "rideId": db_ride.id}


@router.get("/my-rides")
async def my_rides(
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    rides = crud.get_user_rides(db, session.user_id)
    return {"rides": [RideOut.from_ride(ride) for ride in rides]}


@router.get("/matches")
async def search_matches(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    location: Optional[str] = None,
    direction: Optional[str] = None,
    start_date: Annotated[Optional[str], Query(alias="startDate")] = None,
    end_date: Annotated[Optional[str], Query(alias="endDate")] = None
):
    if not location or not direction or not start_date or not end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required search parameters"
        )

    try:
        start, _ = parse_timestamp(start_date)
        end, whole_day = parse_timestamp(end_date)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date format"
        )
    # Order is checked on the dates as given, before a whole-day end is widened
    try:
        MatchWindow.between(start, end)
    except InvalidDateRangeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    if whole_day:
        end += timedelta(days=1) - timedelta(microseconds=1)

    matches = find_matches_in_range(
        db, user.id, user.college, location, direction, start, end)
    return {"matches": [RideOut.from_ride(ride) for ride in matches]}


@router.get("/college")
async def college_rides(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)]
):
    rides = crud.get_college_rides(db, user.college)
    return {"rides": [RideOut.from_ride(ride) for ride in rides]}


@router.get("/{ride_id}")
async def read_ride(
    ride_id: int,
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    ride = crud.get_ride(db, ride_id)
    if not ride:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ride not found"
        )
    return {"ride": RideOut.from_ride(ride)}


@router.get("/{ride_id}/matches")
async def ride_matches(
    ride_id: int,
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    """Other students' rides within this ride's flexibility window."""
    ride = crud.get_ride(db, ride_id)
    if not ride:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ride not found"
        )
    if ride.user_id != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized"
        )
    matches = find_matches_for_ride(db, ride)
    return {"matches": [RideOut.from_ride(match) for match in matches]}


@router.put("/{ride_id}/status")
async def update_ride_status(
    ride_id: int,
    update: RideStatusUpdate,
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    if not crud.update_ride_status(db, ride_id, session.user_id, update.status.value):
        _raise_not_owned(db, ride_id)
    logger.info(f"User {session.user_id} set ride {ride_id} to {update.status.value}")
    return {"success": True}


@router.put("/{ride_id}")
async def update_ride(
    ride_id: int,
    ride: RideUpdate,
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    try:
        updated = crud.update_ride(
            db,
            ride_id,
            session.user_id,
            location=ride.location,
            direction=ride.direction,
            departure_time=ride.departure_time,
            flexibility=ride.flexibility.value
        )
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update ride"
        )
    if not updated:
        _raise_not_owned(db, ride_id)
    return {"success": True}


@router.delete("/{ride_id}")
async def delete_ride(
    ride_id: int,
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    try:
        deleted = crud.delete_ride(db, ride_id, session.user_id)
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete ride"
        )
    if not deleted:
        _raise_not_owned(db, ride_id)
    logger.info(f"User {session.user_id} deleted ride {ride_id}")
    return {"success": True}
