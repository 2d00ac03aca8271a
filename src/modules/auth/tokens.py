"""Session cookie encoding.

The cookie holds a short HS256 JWT whose ``sid`` claim is the opaque session
token stored in the ``sessions`` table. Revoking the row invalidates the
cookie even before the JWT itself expires.
"""

from datetime import datetime

from fastapi import Response
from jose import JWTError, jwt

from src.api.core.constants import JWT_ALGORITHM
from src.utils.dates import as_utc
from src.utils.logger import get_logger
from src.utils.settings.auth import AuthSettings

logger = get_logger(__name__)


def encode_session_cookie(session_token: str, user_id: str, expires_at: datetime) -> str:
    settings = AuthSettings()
    claims = {
        "sid": session_token,
        "sub": user_id,
        "exp": int(as_utc(expires_at).timestamp()),
    }
    return jwt.encode(
        claims, settings.AUTH_SECRET.get_secret_value(), algorithm=JWT_ALGORITHM
    )


def decode_session_cookie(value: str | None) -> str | None:
    """Return the session token carried by the cookie, or None if unusable."""
    if not value:
        return None
    try:
        payload = jwt.decode(
            value,
            AuthSettings().AUTH_SECRET.get_secret_value(),
            algorithms=[JWT_ALGORITHM],
        )
    except JWTError as e:
        logger.debug(f"Session cookie rejected: {e}")
        return None
    session_token = payload.get("sid")
    return session_token if isinstance(session_token, str) else None


def set_session_cookie(
    response: Response,
    session_token: str,
    user_id: str,
    expires_at: datetime,
    cookie_name: str | None = None,
) -> None:
    settings = AuthSettings()
    response.set_cookie(
        key=cookie_name or settings.SESSION_COOKIE_NAME,
        value=encode_session_cookie(session_token, user_id, expires_at),
        expires=as_utc(expires_at),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, cookie_name: str | None = None) -> None:
    settings = AuthSettings()
    response.delete_cookie(
        key=cookie_name or settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
