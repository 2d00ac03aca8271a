from pydantic import BaseModel

from src.api.user.models import SessionModel, UserModel


class AuthSessionData(BaseModel):
    """The signed-in user and their current session."""

    user: UserModel
    session: SessionModel
