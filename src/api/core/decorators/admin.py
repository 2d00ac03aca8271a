from functools import wraps

from fastapi import status

from src.api.core.decorators._common import find_request
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.database.models import UserRole
from src.utils.logger import get_logger

logger = get_logger(__name__)


def require_user_role(*roles: UserRole):
    """Restrict an endpoint to users holding one of ``roles``."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = find_request(*args, **kwargs)

            if not request:
                raise IridiumException(
                    MessageCode.AUTH_REQUIRED,
                    status.HTTP_401_UNAUTHORIZED,
                    {"description": "Request object not found"},
                )

            # Get user from request state (set by auth middleware)
            user = getattr(request.state, "user", None)

            if not user:
                raise IridiumException(
                    MessageCode.AUTH_REQUIRED, status.HTTP_401_UNAUTHORIZED
                )

            if user.role not in roles:
                logger.warning(
                    "Unauthorized role access attempt",
                    user_id=str(user.id),
                    role=user.role,
                    endpoint=request.url.path,
                )
                raise IridiumException(
                    MessageCode.ADMIN_REQUIRED
                    if roles == (UserRole.ADMIN,)
                    else MessageCode.FORBIDDEN,
                    status.HTTP_403_FORBIDDEN,
                    {"required_roles": [role.value for role in roles]},
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def admin():
    return require_user_role(UserRole.ADMIN)
