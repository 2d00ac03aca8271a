from urllib.parse import urlencode

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from src.api.core.constants import SKIP_AUTH_PATHS, SKIP_AUTH_PATTERNS
from src.api.core.messages import MessageCode, get_default_message
from src.modules.auth.service import AuthService
from src.modules.auth.tokens import decode_session_cookie
from src.utils.logger import get_logger
from src.utils.path_helpers import path_matches, path_matches_pattern
from src.utils.settings.auth import AuthSettings

logger = get_logger(__name__)


def is_public_path(request: Request) -> bool:
    return path_matches(request.url.path, SKIP_AUTH_PATHS) or path_matches_pattern(
        request.url.path, SKIP_AUTH_PATTERNS, request.method
    )


def wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def unauthenticated_response(request: Request):
    """Browsers are sent to the sign-in page, API clients get a 401."""
    if wants_html(request):
        query = urlencode({"redirectTo": request.url.path})
        return RedirectResponse(
            f"{AuthSettings().SIGN_IN_URL}?{query}",
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )

    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "message_code": MessageCode.AUTH_REQUIRED,
            "message": get_default_message(MessageCode.AUTH_REQUIRED),
            "details": {},
        },
    )


async def resolve_request_session(request: Request) -> None:
    """Populate request.state.user and request.state.session from the cookie."""
    request.state.user = None
    request.state.session = None

    cookie = request.cookies.get(AuthSettings().SESSION_COOKIE_NAME)
    session_token = decode_session_cookie(cookie)
    if not session_token:
        return

    session_factory = request.app.state.session_factory
    async with session_factory() as db:
        resolved = await AuthService(db).resolve_session(session_token)

    if resolved is None:
        logger.debug("Session cookie did not resolve", path=request.url.path)
        return

    request.state.user, request.state.session = resolved
    structlog.contextvars.bind_contextvars(user_id=str(request.state.user.id))


async def auth_middleware(request: Request, call_next):
    """
    Resolve the session cookie on every request and guard protected routes.

    Public paths are served with or without a session; everything else needs
    a live, unbanned session.
    """
    if request.method == "OPTIONS":
        return await call_next(request)

    await resolve_request_session(request)

    if request.state.user is None and not is_public_path(request):
        logger.debug(
            "Unauthenticated request to protected path",
            path=request.url.path,
            method=request.method,
        )
        return unauthenticated_response(request)

    return await call_next(request)
