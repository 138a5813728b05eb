"""User model."""

from sqlalchemy import JSON, Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and offer ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(255), nullable=False)
    # Avatar upload is not handled yet, stored as an empty image document
    avatar = Column(JSON, nullable=False, default=dict)
    newsletter = Column(Boolean, nullable=False, default=False)
    token = Column(String(64), nullable=False, index=True)
    hash = Column(String(255), nullable=False)
    salt = Column(String(64), nullable=False)

    # Relationships
    offers = relationship("Offer", back_populates="owner")

    @property
    def account(self) -> dict:
        """Public-facing subset of the user shown next to offers."""
        return {"username": self.username, "avatar": self.avatar or {}}
