from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import Annotated

from uniride.auth.utils import decode_session_token
from uniride.config import settings
from uniride.database.base import get_db
from uniride.database.crud import get_user_by_id
from uniride.database.models import Role, User
from uniride.database.schemas import SessionData


def get_session(request: Request) -> SessionData:
    """
    Reads the session record from its cookie.
    Returns an empty (anonymous) session when the cookie is missing or invalid.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return SessionData()
    return decode_session_token(token) or SessionData()


def protected_route(
    session: Annotated[SessionData, Depends(get_session)]
) -> SessionData:
    """
    Ensures that a logged-in user is present, or raises HTTP 401 Unauthorized.
    """
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session


def get_current_user(
    session: Annotated[SessionData, Depends(protected_route)],
    db: Annotated[Session, Depends(get_db)]
) -> User:
    user = get_user_by_id(db, session.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


def require_admin(
    session: Annotated[SessionData, Depends(get_session)]
) -> SessionData:
    if not (session.is_admin or session.role == Role.ADMIN.value):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return session
