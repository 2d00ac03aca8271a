"""Global test configuration and fixtures for the Iridium API."""

import os
from collections.abc import AsyncGenerator
from typing import Callable

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.api.core.dependencies import (
    AsyncSessionDep,
    get_billing_service,
    get_chat_agent,
    get_email_service,
    get_feature_flag_service,
    get_product_analytics_service,
    get_storage_client,
)
from src.database.connection import enable_sqlite_foreign_keys
from src.database.models import (
    Base,
    Organization,
    OrganizationRole,
    User,
    UserRole,
)
from src.modules.auth.service import AuthService
from src.modules.auth.tokens import encode_session_cookie
from src.modules.billing.stripe import StripeBillingService
from src.modules.chat.agent import ChatAgent
from src.modules.posthog.analytics import PostHogAnalyticsService
from src.modules.posthog.flags import FeatureFlagService
from src.redis.client import get_redis_client
from src.utils.settings.auth import AuthSettings
from src.utils.settings.llm import LLMSettings
from src.utils.settings.stripe import StripeSettings

from tests.factories import (
    OrganizationFactory,
    OrganizationMemberFactory,
    UserFactory,
)
from tests.utils.fakes import (
    FakeEmailService,
    FakeOpenAI,
    FakePostHogClient,
    FakeStorageClient,
)

BASE_URL = "http://test-iridium-api"
STRIPE_WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def user_factory():
    return UserFactory


@pytest.fixture
def organization_factory():
    return OrganizationFactory


@pytest.fixture
def member_factory():
    return OrganizationMemberFactory


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Per-test cache directory and no real analytics capture."""
    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("POSTHOG_API_KEY", "")


@pytest.fixture
def test_database_uri(tmp_path) -> str:
    """SQLite file per test unless TEST_DATABASE_URL points elsewhere."""
    return os.getenv(
        "TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'iridium-test.db'}"
    )


@pytest_asyncio.fixture
async def async_engine(test_database_uri):
    """Create async engine with a fresh schema."""
    engine = create_async_engine(test_database_uri, echo=False)
    enable_sqlite_foreign_keys(engine)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _set_journal_mode(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=async_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used by tests to arrange and inspect data."""
    async with session_factory() as session:
        yield session


# Vendor fakes
@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def posthog_client() -> FakePostHogClient:
    return FakePostHogClient()


@pytest.fixture
def openai_client() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def stripe_settings() -> StripeSettings:
    return StripeSettings(
        STRIPE_SECRET_KEY="sk_test_iridium",
        STRIPE_WEBHOOK_SECRET=STRIPE_WEBHOOK_SECRET,
        STRIPE_DEFAULT_PRICE_ID="price_test_monthly",
    )


@pytest_asyncio.fixture
async def app(
    session_factory,
    email_service,
    storage_client,
    posthog_client,
    openai_client,
    stripe_settings,
) -> AsyncGenerator[FastAPI, None]:
    """FastAPI application bound to the test database and vendor fakes."""
    from src.main import app

    async def override_get_redis_client():
        return None

    async def override_get_chat_agent(db: AsyncSessionDep) -> ChatAgent:
        return ChatAgent(
            db,
            client=openai_client,
            settings=LLMSettings(OPENAI_API_KEY="sk-test"),
        )

    app.dependency_overrides.update(
        {
            get_redis_client: override_get_redis_client,
            get_email_service: lambda: email_service,
            get_storage_client: lambda: storage_client,
            get_billing_service: lambda: StripeBillingService(
                settings=stripe_settings, email_service=email_service
            ),
            get_chat_agent: override_get_chat_agent,
            get_feature_flag_service: lambda: FeatureFlagService(
                client=posthog_client
            ),
            get_product_analytics_service: lambda: PostHogAnalyticsService(
                client=posthog_client
            ),
        }
    )

    async with LifespanManager(app):
        app.state.session_factory = session_factory
        yield app

    app.dependency_overrides.clear()


# Test Data Fixtures
@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession, user_factory) -> User:
    return await user_factory.create_async(db_session, name="Test User")


@pytest_asyncio.fixture
async def test_admin_user(db_session: AsyncSession, user_factory) -> User:
    """Platform administrator."""
    return await user_factory.create_async(
        db_session, name="Admin User", role=UserRole.ADMIN
    )


@pytest_asyncio.fixture
async def test_organization(
    db_session: AsyncSession, organization_factory, member_factory, test_user: User
) -> Organization:
    """Organization owned by ``test_user``."""
    organization = await organization_factory.create_async(
        db_session, name="Test Organization"
    )
    await member_factory.create_async(
        db_session,
        organization_id=organization.id,
        user_id=test_user.id,
        role=OrganizationRole.OWNER,
    )
    return organization


@pytest.fixture
def create_member(db_session: AsyncSession, user_factory, member_factory):
    """Create a user with the given role in an organization."""

    async def _create(
        organization: Organization, role: OrganizationRole = OrganizationRole.MEMBER
    ) -> User:
        user = await user_factory.create_async(db_session)
        await member_factory.create_async(
            db_session, organization_id=organization.id, user_id=user.id, role=role
        )
        return user

    return _create


# HTTP Client Fixtures
async def session_cookies(db_session: AsyncSession, user: User) -> dict[str, str]:
    session = await AuthService(db_session).create_session(user, None, "pytest")
    return {
        AuthSettings().SESSION_COOKIE_NAME: encode_session_cookie(
            session.token, str(user.id), session.expires_at
        )
    }


@pytest_asyncio.fixture
async def public_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client without a session."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
        yield ac


@pytest.fixture
def client_factory(app: FastAPI, db_session: AsyncSession):
    """Build signed-in HTTP clients for arbitrary users."""

    async def create_client_for_user(user: User) -> AsyncClient:
        return AsyncClient(
            transport=ASGITransport(app=app),
            base_url=BASE_URL,
            cookies=await session_cookies(db_session, user),
        )

    return create_client_for_user


@pytest_asyncio.fixture
async def authorized_client(
    client_factory: Callable, test_user: User
) -> AsyncGenerator[AsyncClient, None]:
    async with await client_factory(test_user) as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_client(
    client_factory: Callable, test_admin_user: User
) -> AsyncGenerator[AsyncClient, None]:
    async with await client_factory(test_admin_user) as ac:
        yield ac
