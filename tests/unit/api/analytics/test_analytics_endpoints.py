"""Admin analytics endpoint tests."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import stripe
from fastapi import status
from httpx import AsyncClient

from src.api.core.dependencies import get_product_analytics_service
from src.api.core.messages import MessageCode
from src.database.models import MessageRole
from src.modules.posthog.analytics import PostHogAnalyticsService
from tests.factories import MessageFactory, ThreadFactory, UserSessionFactory
from tests.utils.assertions import assert_error_response, assert_success_response
from tests.utils.fakes import FakePostHogClient


def answer_hogql(payload: dict) -> dict:
    query = payload["query"]["query"]
    if "GROUP BY event" in query:
        return {"results": [["$pageview", 40], ["chat_message_sent", 12]]}
    if "$pageview" in query:
        return {"results": [[40]]}
    return {"results": [[52, 7]]}


@pytest.mark.asyncio
async def test_analytics_requires_admin(authorized_client: AsyncClient):
    response = await authorized_client.get("/v1/analytics/users")

    assert_error_response(
        response, MessageCode.ADMIN_REQUIRED, status.HTTP_403_FORBIDDEN
    )


@pytest.mark.asyncio
async def test_user_analytics(
    admin_client: AsyncClient, user_factory, test_admin_user, db_session
):
    old = datetime.now(timezone.utc) - timedelta(days=90)
    await user_factory.create_async(db_session, created_at=old)
    await user_factory.create_async(db_session)
    await user_factory.create_async(db_session, banned=True)

    data = assert_success_response(await admin_client.get("/v1/analytics/users"))

    # Banned users are excluded unless asked for
    assert data["total_users"] == 3
    assert data["new_users_in_range"] == 2
    assert data["total_users_before_range"] == 1
    assert data["banned_users"] == 1
    assert data["role_distribution"] == {"ADMIN": 1, "USER": 2}
    # The admin's own session counts as activity
    assert data["active_users"] == 1
    assert sum(day["count"] for day in data["daily_new_users"]) == 2

    with_inactive = assert_success_response(
        await admin_client.get("/v1/analytics/users?include_inactive=true")
    )
    assert with_inactive["total_users"] == 4


@pytest.mark.asyncio
async def test_inverted_range_is_rejected(admin_client: AsyncClient):
    response = await admin_client.get(
        "/v1/analytics/users",
        params={"start": "2026-02-01T00:00:00Z", "end": "2026-01-01T00:00:00Z"},
    )

    body = assert_error_response(
        response, MessageCode.INVALID_INPUT, status.HTTP_400_BAD_REQUEST
    )
    assert body["details"]["field"] == "start"


@pytest.mark.asyncio
async def test_engagement_metrics(
    admin_client: AsyncClient, user_factory, db_session
):
    chatty = await user_factory.create_async(db_session, name="Chatty")
    quiet = await user_factory.create_async(db_session, name="Quiet")
    thread = await ThreadFactory.create_async(db_session, created_by_id=chatty.id)
    other_thread = await ThreadFactory.create_async(db_session, created_by_id=quiet.id)

    for _ in range(3):
        await MessageFactory.create_async(
            db_session, thread_id=thread.id, user_id=chatty.id
        )
    await MessageFactory.create_async(
        db_session,
        thread_id=thread.id,
        user_id=None,
        role=MessageRole.ASSISTANT,
    )
    await MessageFactory.create_async(
        db_session, thread_id=other_thread.id, user_id=quiet.id
    )

    data = assert_success_response(
        await admin_client.get("/v1/analytics/engagement?top_users_limit=1")
    )

    assert data["total_threads"] == 2
    assert data["total_messages"] == 5
    assert data["messages_by_role"] == {"USER": 4, "ASSISTANT": 1}
    assert data["unique_active_users"] == 2
    assert len(data["top_users"]) == 1
    top = data["top_users"][0]
    assert top["user_id"] == str(chatty.id)
    assert top["message_count"] == 3
    assert top["thread_count"] == 1


@pytest.mark.asyncio
async def test_dashboard_compares_with_previous_period(
    admin_client: AsyncClient, user_factory, test_admin_user, db_session
):
    now = datetime.now(timezone.utc)
    await user_factory.create_async(db_session, created_at=now - timedelta(days=40))
    await user_factory.create_async(db_session)
    await UserSessionFactory.create_async(
        db_session, user_id=test_admin_user.id, created_at=now - timedelta(days=45)
    )

    data = assert_success_response(await admin_client.get("/v1/analytics/dashboard"))

    cards = {card["key"]: card for card in data["cards"]}
    # Admin and one new user this period against one user in the previous one
    assert cards["new_users"]["value"] == 2
    assert cards["new_users"]["previous_value"] == 1
    assert cards["new_users"]["growth_rate"] == 100.0
    assert cards["new_users"]["growth_rate_formatted"] == "+100.0%"
    assert cards["threads"]["growth_rate"] == 0.0

    assert set(data["role_distribution"]) == {"USER", "EDITOR", "ADMIN"}
    assert data["role_distribution"]["EDITOR"] == {"count": 0, "percentage": 0.0}
    assert data["user_trend"][-1]["cumulative_users"] == 3
    assert data["account_health"]["banned_percentage_formatted"] == "0.0%"


@pytest.mark.asyncio
async def test_product_analytics_summary(admin_client: AsyncClient, posthog_client):
    posthog_client.on("POST", "query/", answer_hogql)

    data = assert_success_response(
        await admin_client.get("/v1/analytics/events?days=7&top_events_limit=2")
    )

    assert data == {
        "days": 7,
        "total_events": 52,
        "unique_users": 7,
        "pageviews": 40,
        "top_events": [
            {"event": "$pageview", "count": 40},
            {"event": "chat_message_sent", "count": 12},
        ],
    }
    queries = [payload["query"]["query"] for _, _, payload in posthog_client.requests]
    assert all("INTERVAL 7 DAY" in query for query in queries)


@pytest.mark.asyncio
async def test_product_analytics_not_configured(admin_client: AsyncClient, app):
    app.dependency_overrides[get_product_analytics_service] = (
        lambda: PostHogAnalyticsService(client=FakePostHogClient(manage=False))
    )

    response = await admin_client.get("/v1/analytics/events")

    assert_error_response(
        response,
        MessageCode.ANALYTICS_NOT_CONFIGURED,
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@pytest.mark.asyncio
async def test_product_analytics_provider_failure(
    admin_client: AsyncClient, posthog_client
):
    posthog_client.fail = True

    response = await admin_client.get("/v1/analytics/events")

    body = assert_error_response(
        response, MessageCode.EXTERNAL_SERVICE_ERROR, status.HTTP_502_BAD_GATEWAY
    )
    assert body["details"]["provider"] == "posthog"


@pytest.fixture
def balance_transactions(monkeypatch):
    calls: list[dict] = []
    transactions = [
        {"type": "charge", "amount": 4000, "fee": 146, "net": 3854, "currency": "usd"},
        {"type": "charge", "amount": 2000, "fee": 88, "net": 1912, "currency": "usd"},
        {"type": "refund", "amount": -2000, "fee": 0, "net": -2000, "currency": "usd"},
    ]

    def list_transactions(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(auto_paging_iter=lambda: iter(transactions))

    monkeypatch.setattr(stripe.BalanceTransaction, "list", list_transactions)
    return calls


@pytest.mark.asyncio
async def test_revenue_requires_admin(
    authorized_client: AsyncClient, balance_transactions
):
    response = await authorized_client.get("/v1/analytics/revenue")

    assert_error_response(
        response, MessageCode.ADMIN_REQUIRED, status.HTTP_403_FORBIDDEN
    )
    assert balance_transactions == []


@pytest.mark.asyncio
async def test_revenue_metrics(admin_client: AsyncClient, balance_transactions):
    response = await admin_client.get(
        "/v1/analytics/revenue",
        params={"start": "2026-01-01T00:00:00Z", "end": "2026-02-01T00:00:00Z"},
    )

    data = assert_success_response(response)
    assert data["orders"] == 2
    assert data["revenue"] == {"cents": 6000, "dollars": 60.0}
    assert data["refunds"]["cents"] == 2000
    assert data["fees"]["cents"] == 234
    assert data["net_revenue"]["cents"] == 3766
    assert data["average_order_value"]["cents"] == 3000
    assert balance_transactions[0]["created"] == {
        "gte": int(datetime(2026, 1, 1, tzinfo=timezone.utc).timestamp()),
        "lte": int(datetime(2026, 2, 1, tzinfo=timezone.utc).timestamp()),
    }


@pytest.mark.asyncio
async def test_revenue_defaults_to_last_ninety_days(
    admin_client: AsyncClient, balance_transactions
):
    assert_success_response(await admin_client.get("/v1/analytics/revenue"))

    window = balance_transactions[0]["created"]
    assert window["lte"] - window["gte"] == int(timedelta(days=90).total_seconds())


@pytest.mark.asyncio
async def test_revenue_rejects_inverted_range(
    admin_client: AsyncClient, balance_transactions
):
    response = await admin_client.get(
        "/v1/analytics/revenue",
        params={"start": "2026-02-01T00:00:00Z", "end": "2026-01-01T00:00:00Z"},
    )

    assert_error_response(
        response, MessageCode.INVALID_INPUT, status.HTTP_400_BAD_REQUEST
    )
