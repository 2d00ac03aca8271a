from __future__ import annotations

from datetime import datetime

from sqlalchemy import distinct, func, select

from src.api.analytics.models import (
    AccountHealth,
    DailyCount,
    DashboardData,
    EngagementMetrics,
    MetricCard,
    RoleShare,
    TopUser,
    TrendPoint,
    UserAnalytics,
)
from src.api.core.constants import DEFAULT_TOP_USERS_LIMIT
from src.core.base import BaseService
from src.database.models import Message, MessageRole, Thread, User, UserSession
from src.modules.analytics.metrics import (
    build_user_trend,
    calculate_growth_rate,
    format_percentage,
    percentage,
    previous_period,
    role_percentages,
    to_date,
)
from src.utils.dates import utcnow


class AnalyticsService(BaseService):
    """Aggregate queries behind the admin analytics dashboard."""

    async def _count(self, model, *filters) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(model).where(*filters)
        )
        return result.scalar_one()

    async def _daily_counts(self, column, *filters) -> list[tuple]:
        """Rows per calendar day of ``column``, oldest day first."""
        day = func.date(column)
        result = await self.db.execute(
            select(day.label("day"), func.count().label("count"))
            .where(*filters)
            .group_by(day)
            .order_by(day)
        )
        return [(to_date(row.day), row.count) for row in result.all()]

    async def get_user_analytics(
        self, start: datetime, end: datetime, include_inactive: bool = False
    ) -> UserAnalytics:
        """
        Get user counts for ``[start, end]``.

        Args:
            start: Range start (inclusive)
            end: Range end (inclusive)
            include_inactive: Count banned users in totals and trends

        Returns:
            UserAnalytics with totals, role distribution and daily signups
        """
        scope = [] if include_inactive else [User.banned.is_(False)]
        in_range = [User.created_at >= start, User.created_at <= end]

        total_users = await self._count(User, *scope)
        new_users = await self._count(User, *in_range, *scope)
        banned_users = await self._count(User, User.banned.is_(True))
        users_before = await self._count(User, User.created_at < start, *scope)

        active_users = (
            await self.db.execute(
                select(func.count(distinct(UserSession.user_id))).where(
                    UserSession.created_at >= start, UserSession.created_at <= end
                )
            )
        ).scalar_one()

        roles = await self.db.execute(
            select(User.role, func.count()).where(*scope).group_by(User.role)
        )
        daily = await self._daily_counts(User.created_at, *in_range, *scope)

        return UserAnalytics(
            start=start,
            end=end,
            total_users=total_users,
            new_users_in_range=new_users,
            active_users=active_users,
            banned_users=banned_users,
            role_distribution={str(role): count for role, count in roles.all()},
            daily_new_users=[
                DailyCount(date=day.isoformat(), count=count) for day, count in daily
            ],
            total_users_before_range=users_before,
        )

    async def get_engagement_metrics(
        self,
        start: datetime,
        end: datetime,
        top_users_limit: int = DEFAULT_TOP_USERS_LIMIT,
    ) -> EngagementMetrics:
        thread_range = [Thread.created_at >= start, Thread.created_at <= end]
        message_range = [Message.created_at >= start, Message.created_at <= end]

        total_threads = await self._count(Thread, *thread_range)
        total_messages = await self._count(Message, *message_range)

        by_role = await self.db.execute(
            select(Message.role, func.count())
            .where(*message_range)
            .group_by(Message.role)
        )

        unique_active_users = (
            await self.db.execute(
                select(func.count(distinct(Message.user_id))).where(
                    *message_range,
                    Message.role == MessageRole.USER,
                    Message.user_id.is_not(None),
                )
            )
        ).scalar_one()

        message_count = func.count(Message.id).label("message_count")
        top_rows = (
            await self.db.execute(
                select(User.id, User.name, User.email, message_count)
                .join(Message, Message.user_id == User.id)
                .where(*message_range)
                .group_by(User.id, User.name, User.email)
                .order_by(message_count.desc())
                .limit(top_users_limit)
            )
        ).all()

        thread_counts: dict = {}
        if top_rows:
            thread_count_rows = await self.db.execute(
                select(Thread.created_by_id, func.count())
                .where(
                    *thread_range,
                    Thread.created_by_id.in_([row.id for row in top_rows]),
                )
                .group_by(Thread.created_by_id)
            )
            thread_counts = dict(thread_count_rows.all())

        daily_threads = await self._daily_counts(Thread.created_at, *thread_range)
        daily_messages = await self._daily_counts(Message.created_at, *message_range)

        return EngagementMetrics(
            start=start,
            end=end,
            total_threads=total_threads,
            total_messages=total_messages,
            messages_by_role={str(role): count for role, count in by_role.all()},
            unique_active_users=unique_active_users,
            top_users=[
                TopUser(
                    user_id=str(row.id),
                    name=row.name,
                    email=row.email,
                    message_count=row.message_count,
                    thread_count=thread_counts.get(row.id, 0),
                )
                for row in top_rows
            ],
            daily_threads=[
                DailyCount(date=day.isoformat(), count=count)
                for day, count in daily_threads
            ],
            daily_messages=[
                DailyCount(date=day.isoformat(), count=count)
                for day, count in daily_messages
            ],
        )

    async def get_dashboard(
        self, start: datetime, end: datetime, include_inactive: bool = False
    ) -> DashboardData:
        """Current period figures with growth against the preceding period."""
        previous_start, previous_end = previous_period(start, end)

        users = await self.get_user_analytics(start, end, include_inactive)
        previous_users = await self.get_user_analytics(
            previous_start, previous_end, include_inactive
        )
        engagement = await self.get_engagement_metrics(start, end)
        previous_engagement = await self.get_engagement_metrics(
            previous_start, previous_end, top_users_limit=0
        )

        def card(key: str, label: str, value: int, previous_value: int) -> MetricCard:
            growth = calculate_growth_rate(value, previous_value)
            return MetricCard(
                key=key,
                label=label,
                value=value,
                previous_value=previous_value,
                growth_rate=growth,
                growth_rate_formatted=format_percentage(growth, include_sign=True),
            )

        cards = [
            card(
                "new_users",
                "New users",
                users.new_users_in_range,
                previous_users.new_users_in_range,
            ),
            card(
                "active_users",
                "Active users",
                users.active_users,
                previous_users.active_users,
            ),
            card(
                "threads",
                "Threads",
                engagement.total_threads,
                previous_engagement.total_threads,
            ),
            card(
                "messages",
                "Messages",
                engagement.total_messages,
                previous_engagement.total_messages,
            ),
        ]

        active_percentage = percentage(users.active_users, users.total_users)
        banned_percentage = percentage(users.banned_users, users.total_users)
        trend = build_user_trend(
            [(to_date(d.date), d.count) for d in users.daily_new_users],
            users.total_users_before_range,
        )

        return DashboardData(
            start=start,
            end=end,
            previous_start=previous_start,
            previous_end=previous_end,
            cards=cards,
            role_distribution={
                role: RoleShare(**share)
                for role, share in role_percentages(
                    users.role_distribution, users.total_users
                ).items()
            },
            account_health=AccountHealth(
                active_percentage=active_percentage,
                banned_percentage=banned_percentage,
                active_percentage_formatted=format_percentage(active_percentage),
                banned_percentage_formatted=format_percentage(banned_percentage),
            ),
            user_trend=[TrendPoint(**point) for point in trend],
            daily_threads=engagement.daily_threads,
            daily_messages=engagement.daily_messages,
            top_users=engagement.top_users,
            generated_at=utcnow(),
        )
