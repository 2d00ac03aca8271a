"""PostHog settings configuration."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostHogSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Project key, used for event ingestion
    POSTHOG_API_KEY: str = ""
    POSTHOG_HOST: str = "https://us.i.posthog.com"

    # Personal key, used for the management REST API (flags, HogQL)
    POSTHOG_PERSONAL_API_KEY: SecretStr = SecretStr("")
    POSTHOG_PROJECT_ID: str = ""
    POSTHOG_API_HOST: str = "https://us.posthog.com"
    POSTHOG_TIMEOUT: int = 10

    @property
    def can_capture(self) -> bool:
        return bool(self.POSTHOG_API_KEY)

    @property
    def can_manage(self) -> bool:
        return bool(
            self.POSTHOG_PERSONAL_API_KEY.get_secret_value() and self.POSTHOG_PROJECT_ID
        )
