from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Annotated

from uniride.database.base import get_db
from uniride.database.crud import update_user
from uniride.database.models import Role, User
from uniride.database.schemas import ProfileUpdate, SessionData, UserOut
from uniride.dependencies import get_current_user, get_session, protected_route

router = APIRouter(prefix="/api/user", tags=["Users"])


@router.get("")
async def read_current_user(
    user: Annotated[User, Depends(get_current_user)],
    session: Annotated[SessionData, Depends(protected_route)]
):
    profile = UserOut.model_validate(user).model_dump(exclude={"created_at"})
    profile["role"] = session.role or Role.USER.value
    return {"user": profile}


@router.get("/role")
async def read_role(session: Annotated[SessionData, Depends(get_session)]):
    """Lets the admin page decide whether to offer the switch to user view."""
    if session.is_authenticated and session.role == Role.ADMIN.value:
        return {"role": Role.ADMIN.value, "canSwitch": True}
    return {"role": session.role, "canSwitch": False}


@router.put("")
async def update_profile(
    profile: ProfileUpdate,
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
):
    try:
        updated = update_user(
            db,
            session.user_id,
            name=profile.name,
            college=profile.college,
            gender=profile.gender or None,
            graduation_year=profile.graduation_year or None
        )
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return {"success": True}
