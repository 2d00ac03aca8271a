from fastapi import APIRouter, Path, Query, Request

from src.api.billing.models import (
    CheckoutSessionModel,
    PortalSessionModel,
    PriceModel,
    ProductDetailModel,
    ProductModel,
)
from src.api.billing.requests import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    PortalSessionResponse,
    ProductDetailResponse,
    ProductListResponse,
)
from src.api.core.dependencies import BillingServiceDep, CurrentUserAuthDep
from src.api.core.messages import APIResponse
from src.modules.posthog.client import capture_event

router = APIRouter(
    prefix="/billing",
    tags=["billing"],
)


@router.post("/checkout", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    request: Request,
    request_data: CheckoutSessionRequest,
    current_user: CurrentUserAuthDep,
    billing_service: BillingServiceDep,
) -> CheckoutSessionResponse:
    """Create a Stripe checkout session for the signed-in user."""
    checkout_session = await billing_service.create_checkout_session(
        current_user.user,
        price_id=request_data.price_id,
        success_url=str(request_data.success_url) if request_data.success_url else None,
        cancel_url=str(request_data.cancel_url) if request_data.cancel_url else None,
    )
    await capture_event(
        "checkout_session_created",
        str(current_user.user.id),
        {"checkout_session_id": checkout_session.id},
    )
    return APIResponse.success(
        data=CheckoutSessionModel(
            session_id=checkout_session.id, url=checkout_session.url
        )
    )


@router.get("/portal", response_model=PortalSessionResponse)
async def create_portal_session(
    request: Request,
    current_user: CurrentUserAuthDep,
    billing_service: BillingServiceDep,
    return_url: str | None = Query(default=None, max_length=2048),
) -> PortalSessionResponse:
    """Open the Stripe customer portal; 404 when the user never checked out."""
    portal_session = await billing_service.create_portal_session(
        current_user.user.id, return_url=return_url
    )
    return APIResponse.success(data=PortalSessionModel(url=portal_session.url))


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    request: Request,
    current_user: CurrentUserAuthDep,
    billing_service: BillingServiceDep,
) -> ProductListResponse:
    """Active products; ``default_price.id`` is what checkout expects."""
    products = await billing_service.list_products()
    return APIResponse.success(
        data=[ProductModel.from_stripe(product) for product in products]
    )


@router.get("/products/{product_id}", response_model=ProductDetailResponse)
async def get_product(
    request: Request,
    current_user: CurrentUserAuthDep,
    billing_service: BillingServiceDep,
    product_id: str = Path(min_length=1, max_length=255),
) -> ProductDetailResponse:
    product, prices = await billing_service.get_product(product_id)
    return APIResponse.success(
        data=ProductDetailModel(
            **ProductModel.from_stripe(product).model_dump(),
            prices=[PriceModel.from_stripe(price) for price in prices],
        )
    )
