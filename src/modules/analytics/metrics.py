"""Pure helpers for turning raw counts into dashboard numbers."""

from datetime import date, datetime, timedelta

from src.api.core.constants import DEFAULT_ANALYTICS_RANGE_DAYS
from src.database.models import UserRole
from src.utils.dates import utcnow


def calculate_growth_rate(current: int, previous: int) -> float:
    """Percentage change from ``previous`` to ``current``.

    With no previous activity any current activity counts as 100% growth.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def percentage(part: int, total: int) -> float:
    return part / total * 100 if total > 0 else 0.0


def role_percentages(
    distribution: dict[str, int], total: int
) -> dict[str, dict[str, float]]:
    """Count and share of every user role, including roles nobody has."""
    return {
        role.value: {
            "count": distribution.get(role.value, 0),
            "percentage": percentage(distribution.get(role.value, 0), total),
        }
        for role in UserRole
    }


def build_user_trend(
    daily_new_users: list[tuple[date, int]], starting_total: int
) -> list[dict]:
    cumulative = starting_total
    trend = []
    for day, count in daily_new_users:
        cumulative += count
        trend.append(
            {"date": day.isoformat(), "new_users": count, "cumulative_users": cumulative}
        )
    return trend


def format_percentage(value: float, include_sign: bool = False) -> str:
    formatted = f"{value:.1f}%"
    if include_sign and value > 0:
        return f"+{formatted}"
    return formatted


def previous_period(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """The period of equal length that ends where ``start`` begins."""
    return start - (end - start), start


def default_range(
    start: datetime | None = None,
    end: datetime | None = None,
    days: int = DEFAULT_ANALYTICS_RANGE_DAYS,
) -> tuple[datetime, datetime]:
    end = end or utcnow()
    start = start or end - timedelta(days=days)
    return start, end


def to_date(value) -> date:
    """Normalize a SQL ``DATE()`` result; SQLite returns ISO strings."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))
