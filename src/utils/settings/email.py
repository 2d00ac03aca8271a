"""Email settings configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "Iridium <noreply@iridium.dev>"
    EMAIL_REPLY_TO: str | None = None

    # Receives interest-list and billing notifications
    ADMIN_EMAIL: str = ""
