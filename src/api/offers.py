"""Offer publishing and search endpoints."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError

from src.api.dependencies import get_current_user, get_image_uploader, get_offer_service
from src.errors import PublishError, StorageError, ValidationError, format_validation_error
from src.models.user import User
from src.schemas.offer import (
    OfferFilters,
    OfferResponse,
    OfferSearchResponse,
    PublishResponse,
)
from src.services.image_upload import ImageUploadService
from src.services.offer_service import OfferService, build_product_details

logger = logging.getLogger(__name__)


class PublishRoute(APIRoute):
    """Route whose input errors answer 500, like every other publish failure."""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def publish_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except RequestValidationError as exc:
                errors = exc.errors()
                message = format_validation_error(errors[0]) if errors else "Invalid request"
                logger.warning(f"Publish rejected: {message}")
                raise PublishError(message) from exc
            except ValidationError as exc:
                logger.warning(f"Publish rejected: {exc.message}")
                raise PublishError(exc.message) from exc

        return publish_route_handler


router = APIRouter(tags=["offers"])
publish_router = APIRouter(tags=["offers"], route_class=PublishRoute)


@publish_router.post("/offer/publish", response_model=PublishResponse)
async def publish_offer(
    current_user: Annotated[User, Depends(get_current_user)],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
    uploader: Annotated[ImageUploadService, Depends(get_image_uploader)],
    picture: Annotated[UploadFile, File()],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[float | None, Form()] = None,
    brand: Annotated[str | None, Form()] = None,
    size: Annotated[str | None, Form()] = None,
    condition: Annotated[str | None, Form()] = None,
    color: Annotated[str | None, Form()] = None,
    city: Annotated[str | None, Form()] = None,
):
    """Upload the picture and publish an offer owned by the current user."""
    content = await picture.read()
    image_url = await uploader.upload_file(
        content, picture.content_type or "application/octet-stream"
    )

    try:
        offer = offer_service.create_offer(
            owner=current_user,
            title=title,
            description=description,
            price=price,
            details=build_product_details(brand, size, condition, color, city),
            image_url=image_url,
        )
    except SQLAlchemyError as e:
        logger.error(f"Storing offer failed for user {current_user.id}: {e}")
        raise StorageError(str(e)) from e

    return PublishResponse(new_offer=OfferResponse.model_validate(offer))


@router.get("/offers", response_model=OfferSearchResponse)
def search_offers(
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
    title: str | None = Query(default=None, description="Case-insensitive substring of the name"),
    price_min: float | None = Query(default=None, alias="priceMin"),
    price_max: float | None = Query(default=None, alias="priceMax"),
    sort: str | None = Query(default=None, description="price-asc or price-desc"),
    page: int = Query(default=1, ge=1),
):
    """Search offers with optional filters, price sorting and pages of 5."""
    filters = OfferFilters(title=title, price_min=price_min, price_max=price_max)
    try:
        count, offers = offer_service.search_offers(filters, sort=sort, page=page)
    except SQLAlchemyError as e:
        logger.error(f"Offer search failed: {e}")
        raise ValidationError(str(e)) from e

    return OfferSearchResponse(
        count=count,
        offers=[OfferResponse.model_validate(offer) for offer in offers],
    )
