"""User signup and login endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import ConflictError, ValidationError
from src.models.user import User
from src.schemas.auth import AccountResponse, AuthResponse, UserLogin, UserSignup
from src.services.auth import authenticate_user, create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        token=user.token,
        account=AccountResponse(username=user.username),
    )


@router.post("/signup", response_model=AuthResponse)
def signup(
    user_data: UserSignup,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    if not user_data.username:
        raise ValidationError("Username is mandatory.")

    existing_user = get_user_by_email(db, user_data.email)
    if existing_user:
        logger.warning(f"Signup rejected, {existing_user.email} already registered")
        raise ConflictError(f"User {existing_user.email} already exist")

    try:
        user = create_user(
            db,
            email=user_data.email,
            password=user_data.password,
            username=user_data.username,
            newsletter=user_data.newsletter,
        )
    except SQLAlchemyError as e:
        logger.error(f"Signup failed for {user_data.email}: {e}")
        raise ValidationError(str(e)) from e

    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    try:
        user = authenticate_user(db, credentials.email, credentials.password)
    except SQLAlchemyError as e:
        logger.error(f"Login failed for {credentials.email}: {e}")
        raise ValidationError(str(e)) from e

    logger.info(f"User {user.id} logged in")
    return _auth_response(user)
