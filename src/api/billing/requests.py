from pydantic import BaseModel, Field, HttpUrl

from src.api.billing.models import (
    CheckoutSessionModel,
    PortalSessionModel,
    ProductDetailModel,
    ProductModel,
)
from src.api.core.messages import APIResponse


class CheckoutSessionRequest(BaseModel):
    price_id: str | None = Field(None, min_length=1, max_length=255)
    success_url: HttpUrl | None = None
    cancel_url: HttpUrl | None = None


CheckoutSessionResponse = APIResponse[CheckoutSessionModel]
PortalSessionResponse = APIResponse[PortalSessionModel]
ProductListResponse = APIResponse[list[ProductModel]]
ProductDetailResponse = APIResponse[ProductDetailModel]
