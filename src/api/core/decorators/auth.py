"""Organization role decorators."""

from functools import wraps
from uuid import UUID

from fastapi import Request, status

from src.api.core.decorators._common import find_request
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.database.models import OrganizationRole
from src.modules.organization.permissions import PermissionService
from src.utils.logger import get_logger

logger = get_logger(__name__)


def require_org_role(required: OrganizationRole, org_param: str = "organization_id"):
    """
    Decorator to check the caller's role in an organization.

    Args:
        required: Minimum organization role (OWNER > ADMIN > MEMBER)
        org_param: Name of the endpoint argument holding the organization id

    Uses the user from request.state (set by auth middleware) and the database
    session found among the endpoint arguments.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request: Request | None = find_request(*args, **kwargs)
            db = None

            for value in list(args) + list(kwargs.values()):
                if hasattr(value, "execute"):  # AsyncSession duck typing
                    db = value
                    break

            if not request:
                raise IridiumException(
                    MessageCode.AUTH_REQUIRED,
                    status.HTTP_401_UNAUTHORIZED,
                    {"description": "Request object not found"},
                )
            if not db:
                raise ValueError("Database session not found in function parameters")

            user = getattr(request.state, "user", None)
            if not user:
                raise IridiumException(
                    MessageCode.AUTH_REQUIRED, status.HTTP_401_UNAUTHORIZED
                )

            organization_id: UUID | None = kwargs.get(org_param)
            if organization_id is None:
                raise ValueError(f"Endpoint argument '{org_param}' not found")

            permission_service = PermissionService(db)
            membership = await permission_service.get_active_membership(
                user.id, organization_id
            )
            if membership is None:
                raise IridiumException(
                    MessageCode.ORGANIZATION_NOT_FOUND, status.HTTP_404_NOT_FOUND
                )

            if not permission_service.role_satisfies(membership.role, required):
                raise IridiumException(
                    MessageCode.AUTH_INSUFFICIENT_ROLE_PERMISSIONS,
                    status.HTTP_403_FORBIDDEN,
                    details={
                        "required_role": required.value,
                        "current_role": OrganizationRole(membership.role).value,
                    },
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator
