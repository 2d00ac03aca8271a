"""File cache settings configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    CACHE_DIR: str = ".cache"
    CACHE_FILE_NAME: str = "iridium-cache.json"
    CACHE_DEFAULT_TTL: int = 300
