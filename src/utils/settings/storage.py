"""S3-compatible object storage settings."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    AWS_BUCKET_NAME: str = ""
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: SecretStr = SecretStr("")
    AWS_ENDPOINT_URL: str | None = None
    AWS_DEFAULT_REGION: str = "us-east-1"
    AWS_FORCE_PATH_STYLE: bool = False

    @property
    def is_configured(self) -> bool:
        return bool(self.AWS_BUCKET_NAME and self.AWS_ACCESS_KEY_ID)
