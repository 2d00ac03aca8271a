from datetime import datetime

from pydantic import BaseModel


class DailyCount(BaseModel):
    """Number of rows created on one calendar day."""

    date: str
    count: int


class RoleShare(BaseModel):
    count: int
    percentage: float


class UserAnalytics(BaseModel):
    """User totals for a date range."""

    start: datetime
    end: datetime
    total_users: int
    new_users_in_range: int
    active_users: int
    banned_users: int
    role_distribution: dict[str, int]
    daily_new_users: list[DailyCount]
    total_users_before_range: int


class TopUser(BaseModel):
    user_id: str
    name: str | None
    email: str
    message_count: int
    thread_count: int


class EngagementMetrics(BaseModel):
    """Chat engagement for a date range."""

    start: datetime
    end: datetime
    total_threads: int
    total_messages: int
    messages_by_role: dict[str, int]
    unique_active_users: int
    top_users: list[TopUser]
    daily_threads: list[DailyCount]
    daily_messages: list[DailyCount]


class MetricCard(BaseModel):
    """A headline number compared against the previous period."""

    key: str
    label: str
    value: int
    previous_value: int
    growth_rate: float
    growth_rate_formatted: str


class TrendPoint(BaseModel):
    date: str
    new_users: int
    cumulative_users: int


class AccountHealth(BaseModel):
    active_percentage: float
    banned_percentage: float
    active_percentage_formatted: str
    banned_percentage_formatted: str


class DashboardData(BaseModel):
    start: datetime
    end: datetime
    previous_start: datetime
    previous_end: datetime
    cards: list[MetricCard]
    role_distribution: dict[str, RoleShare]
    account_health: AccountHealth
    user_trend: list[TrendPoint]
    daily_threads: list[DailyCount]
    daily_messages: list[DailyCount]
    top_users: list[TopUser]
    generated_at: datetime


class TopEvent(BaseModel):
    event: str
    count: int


class ProductAnalyticsSummary(BaseModel):
    """Event totals read back from the product analytics provider."""

    days: int
    total_events: int
    unique_users: int
    pageviews: int
    top_events: list[TopEvent]


class MoneyAmount(BaseModel):
    cents: int
    dollars: float


class RevenueMetrics(BaseModel):
    """Settled Stripe revenue for a date range, in the account currency."""

    start: datetime
    end: datetime
    currency: str
    orders: int
    revenue: MoneyAmount
    refunds: MoneyAmount
    fees: MoneyAmount
    net_revenue: MoneyAmount
    average_order_value: MoneyAmount
    net_average_order_value: MoneyAmount
