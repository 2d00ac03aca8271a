"""Analytics API router (admins only)."""

from datetime import datetime

from fastapi import APIRouter, Query, Request, status

from src.api.core.constants import (
    DEFAULT_ANALYTICS_RANGE_DAYS,
    DEFAULT_REVENUE_RANGE_DAYS,
    DEFAULT_TOP_USERS_LIMIT,
)
from src.api.core.decorators.admin import admin
from src.api.core.dependencies import (
    AnalyticsServiceDep,
    BillingServiceDep,
    CurrentUserAuthDep,
    ProductAnalyticsServiceDep,
)
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import APIResponse, MessageCode
from src.modules.analytics.metrics import default_range
from src.modules.posthog.client import PostHogError
from .models import ProductAnalyticsSummary, RevenueMetrics
from .requests import (
    DashboardAnalyticsResponse,
    EngagementMetricsResponse,
    ProductAnalyticsResponse,
    RevenueMetricsResponse,
    UserAnalyticsResponse,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def resolve_range(
    start: datetime | None,
    end: datetime | None,
    days: int = DEFAULT_ANALYTICS_RANGE_DAYS,
) -> tuple[datetime, datetime]:
    """Fill in the default window and reject inverted ranges."""
    start, end = default_range(start, end, days)
    if start > end:
        raise IridiumException(
            MessageCode.INVALID_INPUT,
            status.HTTP_400_BAD_REQUEST,
            {"field": "start", "reason": "start must not be after end"},
        )
    return start, end


@router.get("/users", response_model=UserAnalyticsResponse)
@admin()
async def get_user_analytics(
    request: Request,
    current_user: CurrentUserAuthDep,
    analytics_service: AnalyticsServiceDep,
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    include_inactive: bool = Query(default=False),
) -> UserAnalyticsResponse:
    """User totals, role distribution and daily signups for a date range."""
    start, end = resolve_range(start, end)
    data = await analytics_service.get_user_analytics(start, end, include_inactive)
    return APIResponse.success(data=data)


@router.get("/engagement", response_model=EngagementMetricsResponse)
@admin()
async def get_engagement_metrics(
    request: Request,
    current_user: CurrentUserAuthDep,
    analytics_service: AnalyticsServiceDep,
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    top_users_limit: int = Query(default=DEFAULT_TOP_USERS_LIMIT, ge=0, le=100),
) -> EngagementMetricsResponse:
    start, end = resolve_range(start, end)
    data = await analytics_service.get_engagement_metrics(
        start, end, top_users_limit=top_users_limit
    )
    return APIResponse.success(data=data)


@router.get("/dashboard", response_model=DashboardAnalyticsResponse)
@admin()
async def get_dashboard(
    request: Request,
    current_user: CurrentUserAuthDep,
    analytics_service: AnalyticsServiceDep,
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    include_inactive: bool = Query(default=False),
) -> DashboardAnalyticsResponse:
    """Headline cards compared against the preceding period of equal length."""
    start, end = resolve_range(start, end)
    data = await analytics_service.get_dashboard(start, end, include_inactive)
    return APIResponse.success(data=data)


@router.get("/events", response_model=ProductAnalyticsResponse)
@admin()
async def get_product_analytics(
    request: Request,
    current_user: CurrentUserAuthDep,
    product_analytics: ProductAnalyticsServiceDep,
    days: int = Query(default=DEFAULT_ANALYTICS_RANGE_DAYS, ge=1, le=365),
    top_events_limit: int = Query(default=10, ge=1, le=50),
) -> ProductAnalyticsResponse:
    """Event counts read back from the product analytics provider."""
    if not product_analytics.client.settings.can_manage:
        raise IridiumException(
            MessageCode.ANALYTICS_NOT_CONFIGURED, status.HTTP_503_SERVICE_UNAVAILABLE
        )
    try:
        summary = await product_analytics.get_summary(
            days=days, top_events_limit=top_events_limit
        )
    except PostHogError as e:
        raise IridiumException(
            MessageCode.EXTERNAL_SERVICE_ERROR,
            status.HTTP_502_BAD_GATEWAY,
            {"provider": "posthog"},
        ) from e
    return APIResponse.success(data=ProductAnalyticsSummary(**summary))


@router.get("/revenue", response_model=RevenueMetricsResponse)
@admin()
async def get_revenue_metrics(
    request: Request,
    current_user: CurrentUserAuthDep,
    billing_service: BillingServiceDep,
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
) -> RevenueMetricsResponse:
    """Orders, revenue, refunds and fees from Stripe; defaults to the last 90 days."""
    start, end = resolve_range(start, end, DEFAULT_REVENUE_RANGE_DAYS)
    metrics = await billing_service.get_revenue_metrics(start, end)
    return APIResponse.success(data=RevenueMetrics(**metrics))
