"""Pydantic schemas for API request/response validation."""

from src.schemas.auth import AccountResponse, AuthResponse, UserLogin, UserSignup
from src.schemas.offer import (
    OfferFilters,
    OfferResponse,
    OfferSearchResponse,
    OwnerResponse,
    PublishResponse,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "AccountResponse",
    "AuthResponse",
    "OfferFilters",
    "OfferResponse",
    "OfferSearchResponse",
    "OwnerResponse",
    "PublishResponse",
]
