from typing import Annotated, AsyncGenerator

import redis.asyncio as redis
from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.context import AuthenticatedUserContext
from src.modules.analytics.service import AnalyticsService
from src.modules.auth.service import AuthService
from src.modules.billing.stripe import StripeBillingService
from src.modules.chat.agent import ChatAgent
from src.modules.chat.threads import ThreadService
from src.modules.email.service import EmailService
from src.modules.interest.service import InterestListService
from src.modules.organization.invitation import OrganizationInvitationService
from src.modules.organization.use_cases import OrganizationService
from src.modules.posthog.analytics import PostHogAnalyticsService
from src.modules.posthog.flags import FeatureFlagService
from src.modules.user.admin import AdminService
from src.modules.user.management import UserManagementService
from src.redis.client import get_redis_client
from src.utils.s3_client import StorageClient


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


async def get_auth_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> AuthService:
    return AuthService(db)


async def get_user_management_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserManagementService:
    return UserManagementService(db)


async def get_admin_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> AdminService:
    return AdminService(db)


async def get_organization_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrganizationService:
    return OrganizationService(db)


async def get_organization_invitation_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrganizationInvitationService:
    return OrganizationInvitationService(db)


async def get_analytics_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> AnalyticsService:
    return AnalyticsService(db)


async def get_thread_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ThreadService:
    return ThreadService(db)


async def get_chat_agent(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ChatAgent:
    return ChatAgent(db)


async def get_interest_list_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> InterestListService:
    return InterestListService(db)


async def get_email_service() -> EmailService:
    return EmailService()


async def get_billing_service(
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> StripeBillingService:
    return StripeBillingService(email_service=email_service)


async def get_storage_client() -> StorageClient:
    return StorageClient()


async def get_feature_flag_service() -> FeatureFlagService:
    return FeatureFlagService()


async def get_product_analytics_service() -> PostHogAnalyticsService:
    return PostHogAnalyticsService()


async def get_current_user_authenticated(request: Request) -> AuthenticatedUserContext:
    """Dependency to get the signed-in user with their session.

    The auth middleware sets request.state.user and request.state.session.
    """
    user = getattr(request.state, "user", None)
    session = getattr(request.state, "session", None)

    if not user or not session:
        raise IridiumException(MessageCode.AUTH_REQUIRED, status.HTTP_401_UNAUTHORIZED)

    return AuthenticatedUserContext(user=user, session=session)


AsyncSessionDep = Annotated[AsyncSession, Depends(get_db_session)]
RedisDep = Annotated[redis.Redis | None, Depends(get_redis_client)]

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserManagementServiceDep = Annotated[
    UserManagementService, Depends(get_user_management_service)
]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
OrganizationServiceDep = Annotated[
    OrganizationService, Depends(get_organization_service)
]
OrganizationInvitationServiceDep = Annotated[
    OrganizationInvitationService, Depends(get_organization_invitation_service)
]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
ThreadServiceDep = Annotated[ThreadService, Depends(get_thread_service)]
ChatAgentDep = Annotated[ChatAgent, Depends(get_chat_agent)]
InterestListServiceDep = Annotated[
    InterestListService, Depends(get_interest_list_service)
]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]
BillingServiceDep = Annotated[StripeBillingService, Depends(get_billing_service)]
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
FeatureFlagServiceDep = Annotated[
    FeatureFlagService, Depends(get_feature_flag_service)
]
ProductAnalyticsServiceDep = Annotated[
    PostHogAnalyticsService, Depends(get_product_analytics_service)
]

CurrentUserAuthDep = Annotated[
    AuthenticatedUserContext, Depends(get_current_user_authenticated)
]
