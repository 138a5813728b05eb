"""Offer service for publishing and searching listings."""

import logging
import math

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from src.errors import ValidationError
from src.models.offer import Offer
from src.models.user import User
from src.schemas.offer import OfferFilters

logger = logging.getLogger(__name__)

OFFERS_PAGE_SIZE = 5

# Detail keys in display order: brand, size, condition, color, location
PRODUCT_DETAIL_KEYS = ("MARQUE", "TAILLE", "ÉTAT", "COULEUR", "EMPLACEMENT")


def build_product_details(
    brand: str | None,
    size: str | None,
    condition: str | None,
    color: str | None,
    location: str | None,
) -> list[dict[str, str | None]]:
    """Build the ordered list of single-key detail records."""
    values = (brand, size, condition, color, location)
    return [{key: value} for key, value in zip(PRODUCT_DETAIL_KEYS, values, strict=True)]


class OfferService:
    """Service for offer-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_offer(
        self,
        owner: User,
        title: str | None,
        description: str | None,
        price: float | None,
        details: list[dict[str, str | None]],
        image_url: str,
    ) -> Offer:
        """Persist a new offer owned by ``owner``."""
        if not title:
            raise ValidationError("Offer title is mandatory.")
        if price is None:
            raise ValidationError("Offer price is mandatory.")
        if not math.isfinite(price):
            raise ValidationError("Offer price must be a number.")
        if price < 0:
            raise ValidationError("Offer price must be positive.")

        offer = Offer(
            product_name=title,
            product_description=description,
            product_price=price,
            product_details=details,
            product_image={"secure_url": image_url},
            owner_id=owner.id,
        )
        self.db.add(offer)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(offer)
        logger.info(f"User {owner.id} published offer {offer.id}")
        return offer

    def _filtered_query(self, filters: OfferFilters):
        query = self.db.query(Offer)
        if filters.title:
            query = query.filter(Offer.product_name.icontains(filters.title, autoescape=True))
        # Both bounds apply to the same column and combine into one range
        if filters.price_min is not None:
            query = query.filter(Offer.product_price >= filters.price_min)
        if filters.price_max is not None:
            query = query.filter(Offer.product_price <= filters.price_max)
        return query

    def search_offers(
        self,
        filters: OfferFilters,
        sort: str | None = None,
        page: int = 1,
        limit: int = OFFERS_PAGE_SIZE,
    ) -> tuple[int, list[Offer]]:
        """Search offers.

        Returns the total number of matches (ignoring pagination) and the
        requested 1-indexed page of offers with their owners loaded.
        Pages past the end are empty.
        """
        count = self._filtered_query(filters).count()

        query = self._filtered_query(filters).options(joinedload(Offer.owner))
        if sort == "price-asc":
            query = query.order_by(Offer.product_price.asc(), Offer.id.asc())
        elif sort == "price-desc":
            query = query.order_by(Offer.product_price.desc(), Offer.id.asc())
        else:
            query = query.order_by(Offer.id.asc())

        offers = query.offset((page - 1) * limit).limit(limit).all()
        return count, offers
