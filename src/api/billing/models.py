"""Billing response models."""

from typing import Any

from pydantic import BaseModel


class CheckoutSessionModel(BaseModel):
    session_id: str
    url: str


class PortalSessionModel(BaseModel):
    url: str


class PriceModel(BaseModel):
    """A Stripe price; ``interval`` is None for one-time prices."""

    id: str
    currency: str
    unit_amount: int | None = None
    interval: str | None = None
    interval_count: int | None = None

    @classmethod
    def from_stripe(cls, price: Any) -> "PriceModel":
        recurring = getattr(price, "recurring", None)
        return cls(
            id=price.id,
            currency=price.currency,
            unit_amount=getattr(price, "unit_amount", None),
            interval=getattr(recurring, "interval", None) if recurring else None,
            interval_count=(
                getattr(recurring, "interval_count", None) if recurring else None
            ),
        )


class ProductModel(BaseModel):
    id: str
    name: str
    description: str | None = None
    images: list[str] = []
    default_price: PriceModel | None = None

    @classmethod
    def from_stripe(cls, product: Any) -> "ProductModel":
        default_price = getattr(product, "default_price", None)
        # Unexpanded prices are bare ids
        if isinstance(default_price, str):
            default_price = None
        return cls(
            id=product.id,
            name=product.name,
            description=getattr(product, "description", None),
            images=list(getattr(product, "images", None) or []),
            default_price=(
                PriceModel.from_stripe(default_price) if default_price else None
            ),
        )


class ProductDetailModel(ProductModel):
    prices: list[PriceModel]
