"""Offer schemas."""

from pydantic import BaseModel, ConfigDict, Field


class OwnerAccount(BaseModel):
    """Public account sub-object of an offer owner."""

    username: str
    avatar: dict = Field(default_factory=dict)


class OwnerResponse(BaseModel):
    """Offer owner, populated with the account only."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    account: OwnerAccount


class ProductImage(BaseModel):
    """Hosted product picture."""

    secure_url: str


class OfferResponse(BaseModel):
    """Offer response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_name: str
    product_description: str | None
    product_price: float
    product_details: list[dict[str, str | None]]
    product_image: ProductImage | None
    owner: OwnerResponse


class PublishResponse(BaseModel):
    """Response of a successful publish."""

    model_config = ConfigDict(populate_by_name=True)

    new_offer: OfferResponse = Field(..., alias="newOffer")


class OfferFilters(BaseModel):
    """Optional search filters, AND-combined."""

    title: str | None = None
    price_min: float | None = None
    price_max: float | None = None


class OfferSearchResponse(BaseModel):
    """Paginated offer search result."""

    count: int
    offers: list[OfferResponse]
