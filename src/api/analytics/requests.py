"""Analytics request and response models."""

from src.api.core.messages import APIResponse
from .models import (
    DashboardData,
    EngagementMetrics,
    ProductAnalyticsSummary,
    RevenueMetrics,
    UserAnalytics,
)


class UserAnalyticsResponse(APIResponse[UserAnalytics]):
    """Response for user totals over a date range."""

    pass


class EngagementMetricsResponse(APIResponse[EngagementMetrics]):
    """Response for chat engagement over a date range."""

    pass


class DashboardAnalyticsResponse(APIResponse[DashboardData]):
    """Response for dashboard overview analytics."""

    pass


class ProductAnalyticsResponse(APIResponse[ProductAnalyticsSummary]):
    pass


class RevenueMetricsResponse(APIResponse[RevenueMetrics]):
    pass
