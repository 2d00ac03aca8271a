"""Email/password sign-up, sign-in and session endpoints."""

from fastapi import APIRouter, Request, Response, status

from src.api.auth.models import AuthSessionData
from src.api.auth.requests import (
    AuthSessionResponse,
    SignInRequest,
    SignOutResponse,
    SignUpRequest,
)
from src.api.core.constants import AUTH_RATE_LIMIT, AUTH_RATE_LIMIT_WINDOW_SECONDS
from src.api.core.decorators.rate_limit import rate_limit
from src.api.core.dependencies import (
    AuthServiceDep,
    CurrentUserAuthDep,
    EmailServiceDep,
    RedisDep,
)
from src.api.core.messages import APIResponse, MessageCode
from src.api.user.models import SessionModel, UserModel
from src.modules.auth.tokens import (
    clear_session_cookie,
    decode_session_cookie,
    set_session_cookie,
)
from src.modules.posthog.client import capture_event
from src.utils.logger import get_client_ip
from src.utils.settings.app import AppSettings
from src.utils.settings.auth import AuthSettings

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_data(user, session) -> AuthSessionData:
    return AuthSessionData(
        user=UserModel.model_validate(user),
        session=SessionModel.model_validate(session),
    )


@router.post(
    "/sign-up",
    response_model=AuthSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
@rate_limit(AUTH_RATE_LIMIT, AUTH_RATE_LIMIT_WINDOW_SECONDS, scope="auth")
async def sign_up(
    request: Request,
    response: Response,
    body: SignUpRequest,
    auth_service: AuthServiceDep,
    email_service: EmailServiceDep,
    redis_client: RedisDep,
) -> AuthSessionResponse:
    """Create an account and sign it in."""
    user, session = await auth_service.sign_up(
        name=body.name,
        email=body.email,
        password=body.password,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    set_session_cookie(response, session.token, str(user.id), session.expires_at)

    await email_service.best_effort(
        email_service.send_welcome_email(user.email, user.name, AppSettings().APP_URL)
    )
    await capture_event("user_signed_up", str(user.id))

    return APIResponse.success(
        message_code=MessageCode.SIGNED_UP, data=_session_data(user, session)
    )


@router.post("/sign-in", response_model=AuthSessionResponse)
@rate_limit(AUTH_RATE_LIMIT, AUTH_RATE_LIMIT_WINDOW_SECONDS, scope="auth")
async def sign_in(
    request: Request,
    response: Response,
    body: SignInRequest,
    auth_service: AuthServiceDep,
    redis_client: RedisDep,
) -> AuthSessionResponse:
    user, session = await auth_service.sign_in(
        email=body.email,
        password=body.password,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    set_session_cookie(response, session.token, str(user.id), session.expires_at)

    return APIResponse.success(
        message_code=MessageCode.SIGNED_IN, data=_session_data(user, session)
    )


@router.post("/sign-out", response_model=SignOutResponse)
async def sign_out(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
) -> SignOutResponse:
    """End the current session. Safe to call without one."""
    session = getattr(request.state, "session", None)
    if session is not None:
        await auth_service.sign_out(session.token)
    clear_session_cookie(response)

    return APIResponse.success(message_code=MessageCode.SIGNED_OUT, data=True)


@router.post("/stop-impersonating", response_model=AuthSessionResponse)
async def stop_impersonating(
    request: Request,
    response: Response,
    current_user: CurrentUserAuthDep,
    auth_service: AuthServiceDep,
) -> AuthSessionResponse:
    """Return an impersonating admin to their own session."""
    admin_cookie_name = AuthSettings().ADMIN_SESSION_COOKIE_NAME
    user, session = await auth_service.stop_impersonating(
        current_user.session,
        decode_session_cookie(request.cookies.get(admin_cookie_name)),
    )
    set_session_cookie(response, session.token, str(user.id), session.expires_at)
    clear_session_cookie(response, admin_cookie_name)

    return APIResponse.success(
        message_code=MessageCode.IMPERSONATION_STOPPED,
        data=_session_data(user, session),
    )


@router.get("/session", response_model=APIResponse[AuthSessionData | None])
async def get_session(request: Request) -> APIResponse[AuthSessionData | None]:
    """Current user and session, or null data when signed out."""
    user = getattr(request.state, "user", None)
    session = getattr(request.state, "session", None)
    if user is None or session is None:
        return APIResponse.success(data=None)

    return APIResponse.success(data=_session_data(user, session))
