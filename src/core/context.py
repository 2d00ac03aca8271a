"""Authentication context model for typed user authentication."""

from dataclasses import dataclass

from src.database.models import User, UserRole, UserSession


@dataclass
class AuthenticatedUserContext:
    """The signed-in user and the session that authenticated the request."""

    user: User
    session: UserSession

    def __post_init__(self):
        if not self.user:
            raise ValueError("User is required in authentication context")
        if not self.session:
            raise ValueError("Session is required in authentication context")

    @property
    def is_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN
