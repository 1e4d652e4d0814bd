import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from uniride.auth.utils import clear_session_cookie, set_session_cookie
from uniride.config import settings
from uniride.database.base import get_db
from uniride.database.crud import get_all_rides, get_all_users
from uniride.database.schemas import (
    AdminLoginRequest, AdminRideOut, SessionData, UserOut)
from uniride.dependencies import get_session, require_admin

router = APIRouter(prefix="/api/admin", tags=["Admin"])

logger = logging.getLogger(__name__)


@router.post("/login")
async def admin_login(
    form: AdminLoginRequest,
    response: Response,
    session: Annotated[SessionData, Depends(get_session)]
):
    expected = settings.ADMIN_PASSWORD
    if not expected or not secrets.compare_digest(
            form.password.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected admin login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin password"
        )

    set_session_cookie(response, session.model_copy(update={"is_admin": True}))
    logger.info("Admin session created")
    return {"success": True}


@router.post("/logout")
async def admin_logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}


@router.get("/users")
async def list_users(
    admin: Annotated[SessionData, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)]
):
    try:
        users = get_all_users(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching users: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to fetch users", "details": str(e)}
        )
    logger.info(f"Admin: retrieved {len(users)} users")
    return {"users": [UserOut.model_validate(user) for user in users]}


@router.get("/rides")
async def list_rides(
    admin: Annotated[SessionData, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)]
):
    try:
        rides = get_all_rides(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching rides: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to fetch rides", "details": str(e)}
        )
    logger.info(f"Admin: retrieved {len(rides)} rides")
    return {"rides": [AdminRideOut.from_ride(ride) for ride in rides]}
