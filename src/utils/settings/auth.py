from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    AUTH_SECRET: SecretStr = SecretStr("dev-only-auth-secret-change-me")
    SESSION_COOKIE_NAME: str = "iridium_session"
    SESSION_TTL_DAYS: int = 7
    # Holds the admin's own session while they act as another user
    ADMIN_SESSION_COOKIE_NAME: str = "iridium_admin_session"
    IMPERSONATION_TTL_MINUTES: int = 60
    COOKIE_SECURE: bool = False

    # Where browsers are sent when a protected route is hit without a session
    SIGN_IN_URL: str = "/sign-in"
