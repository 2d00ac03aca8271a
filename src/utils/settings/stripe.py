"""Stripe settings configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr


class StripeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    STRIPE_SECRET_KEY: SecretStr = SecretStr("")
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_DEFAULT_PRICE_ID: str = ""

    BILLING_SUCCESS_URL: str = "http://localhost:5173/checkout/success"
    BILLING_CANCEL_URL: str = "http://localhost:5173/pricing"
    BILLING_PORTAL_RETURN_URL: str = "http://localhost:5173/dashboard"

    @property
    def is_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY.get_secret_value())
