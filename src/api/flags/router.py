"""Feature flags stored in PostHog."""

from fastapi import APIRouter, Request, status

from src.api.core.decorators.admin import admin
from src.api.core.dependencies import CurrentUserAuthDep, FeatureFlagServiceDep
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import APIResponse, MessageCode
from src.api.flags.models import FeatureFlagModel
from src.api.flags.requests import (
    ActiveFlagsResponse,
    FeatureFlagListResponse,
    FeatureFlagResponse,
    FeatureFlagToggleRequest,
)
from src.modules.posthog.client import PostHogError
from src.modules.posthog.flags import FeatureFlagService

router = APIRouter(prefix="/flags", tags=["flags"])


def require_flag_management(flag_service: FeatureFlagService) -> None:
    if not flag_service.client.settings.can_manage:
        raise IridiumException(
            MessageCode.ANALYTICS_NOT_CONFIGURED, status.HTTP_503_SERVICE_UNAVAILABLE
        )


def provider_error(error: PostHogError) -> IridiumException:
    return IridiumException(
        MessageCode.EXTERNAL_SERVICE_ERROR,
        status.HTTP_502_BAD_GATEWAY,
        {"provider": "posthog", "reason": str(error)},
    )


@router.get("", response_model=FeatureFlagListResponse)
@admin()
async def list_flags(
    request: Request,
    current_user: CurrentUserAuthDep,
    flag_service: FeatureFlagServiceDep,
) -> FeatureFlagListResponse:
    require_flag_management(flag_service)
    try:
        flags = await flag_service.list_flags()
    except PostHogError as e:
        raise provider_error(e) from e
    return APIResponse.success(
        data=[FeatureFlagModel.model_validate(flag) for flag in flags]
    )


@router.get("/active", response_model=ActiveFlagsResponse)
async def get_active_flags(
    request: Request,
    current_user: CurrentUserAuthDep,
    flag_service: FeatureFlagServiceDep,
) -> ActiveFlagsResponse:
    """Flag key to active state; empty when flags are unavailable."""
    return APIResponse.success(data=await flag_service.get_active_flags())


@router.patch("/{flag_id}", response_model=FeatureFlagResponse)
@admin()
async def toggle_flag(
    flag_id: int,
    request: Request,
    toggle_data: FeatureFlagToggleRequest,
    current_user: CurrentUserAuthDep,
    flag_service: FeatureFlagServiceDep,
) -> FeatureFlagResponse:
    require_flag_management(flag_service)
    try:
        flag = await flag_service.toggle_flag(flag_id, toggle_data.active)
    except PostHogError as e:
        raise provider_error(e) from e
    return APIResponse.success(
        message_code=MessageCode.FEATURE_FLAG_UPDATED,
        data=FeatureFlagModel.model_validate(flag),
    )
