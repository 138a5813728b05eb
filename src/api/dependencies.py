"""FastAPI dependencies for authentication, database and services."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import UnauthorizedError
from src.models.user import User
from src.services.auth import get_user_by_token
from src.services.image_upload import ImageUploadService
from src.services.offer_service import OfferService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Resolve the user owning the bearer token, or reject the request."""
    if credentials is None:
        logger.warning("Rejected request without bearer token")
        raise UnauthorizedError("Unauthorized")

    user = get_user_by_token(db, credentials.credentials)
    if user is None:
        logger.warning("Rejected request with unknown bearer token")
        raise UnauthorizedError("Unauthorized")

    return user


def get_image_uploader(request: Request) -> ImageUploadService:
    """Get the process-wide image upload service created at startup."""
    return request.app.state.image_uploader


def get_offer_service(
    db: Annotated[Session, Depends(get_db)],
) -> OfferService:
    """Get offer service with dependencies."""
    return OfferService(db)
