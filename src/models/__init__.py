"""SQLAlchemy models."""

from src.models.offer import Offer
from src.models.user import User

__all__ = [
    "User",
    "Offer",
]
