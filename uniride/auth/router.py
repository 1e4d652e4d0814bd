import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from uniride.database.base import get_db
from uniride.database.crud import (
    DuplicateEmailError, create_user, get_user_by_email)
from uniride.database.schemas import LoginRequest, RegisterRequest, SessionData
from uniride.security import verify_password
from .utils import clear_session_cookie, set_session_cookie

router = APIRouter(prefix="/api", tags=["Authentication"])

logger = logging.getLogger(__name__)


@router.post("/register")
async def register(
    form: RegisterRequest,
    db: Session = Depends(get_db)
):
    # Fast path; the unique index is what actually guarantees uniqueness
    if get_user_by_email(db, form.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    try:
        create_user(
            db,
            email=form.email,
            password=form.password,
            name=form.name,
            college=form.college,
            gender=form.gender,
            graduation_year=form.graduation_year
        )
    except DuplicateEmailError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    except SQLAlchemyError as e:
        logger.error(f"Registration failed for {form.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed"
        )

    logger.info(f"Registered {form.email}")
    return {"success": True, "message": "Registration successful"}


@router.post("/login")
async def login(
    credentials: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    user = get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.info(f"Failed login for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    set_session_cookie(response, SessionData(
        user_id=user.id,
        user_email=user.email,
        role=user.role,
    ))
    return {
        "success": True,
        "user": {
            "id": user.id,
            "name": user.name,
            "college": user.college,
            "role": user.role,
        },
    }


@router.post("/logout")
async def logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}
