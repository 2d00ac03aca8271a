"""Public interest list (waitlist) signup."""

from fastapi import APIRouter, Request, status

from src.api.admin.models import InterestSignupModel
from src.api.core.constants import (
    INTEREST_RATE_LIMIT,
    INTEREST_RATE_LIMIT_WINDOW_SECONDS,
)
from src.api.core.decorators.rate_limit import rate_limit
from src.api.core.dependencies import (
    EmailServiceDep,
    InterestListServiceDep,
    RedisDep,
)
from src.api.core.messages import APIResponse, MessageCode
from src.api.interest.requests import InterestSignupRequest, InterestSignupResponse
from src.modules.posthog.client import capture_event

router = APIRouter(prefix="/interest", tags=["interest"])


@router.post(
    "", response_model=InterestSignupResponse, status_code=status.HTTP_201_CREATED
)
@rate_limit(INTEREST_RATE_LIMIT, INTEREST_RATE_LIMIT_WINDOW_SECONDS, scope="interest")
async def join_interest_list(
    request: Request,
    signup_data: InterestSignupRequest,
    interest_service: InterestListServiceDep,
    email_service: EmailServiceDep,
    redis_client: RedisDep,
) -> InterestSignupResponse:
    """Add an email to the interest list; 409 when it is already signed up."""
    signup = await interest_service.create_signup(
        email=signup_data.email,
        inquiry_type=signup_data.inquiry_type,
        note=signup_data.note,
    )

    await email_service.best_effort(
        email_service.send_interest_confirmation_email(signup.email)
    )
    await email_service.best_effort(
        email_service.send_admin_interest_notification(
            signup.email, signup.inquiry_type, signup.note
        )
    )
    await capture_event(
        "interest_list_signup",
        signup.email,
        {"inquiry_type": signup_data.inquiry_type.value},
    )

    return APIResponse.success(
        message_code=MessageCode.INTEREST_SIGNUP_CREATED,
        data=InterestSignupModel.model_validate(signup),
    )
