"""Offer model."""

from sqlalchemy import JSON, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Offer(Base, TimestampMixin):
    """A single product listing published by a user."""

    __tablename__ = "offers"

    id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String(500), nullable=False, index=True)
    product_description = Column(String, nullable=True)
    product_price = Column(Float, nullable=False, index=True)
    # [{"MARQUE": "Zara"}, {"TAILLE": "M"}, {"ÉTAT": "Neuf"}, ...]
    product_details = Column(JSON, nullable=False, default=list)
    # {"secure_url": "https://res.cloudinary.com/..."}
    product_image = Column(JSON, nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="offers")
