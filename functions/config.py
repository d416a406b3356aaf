from typing import Optional

from models.constants import MUX_ASSETS_URL
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the deployed functions"""

    log_level: str = "INFO"

    # Mux API credentials, injected as secrets in production
    mux_token_id: Optional[str] = None
    mux_token_secret: Optional[str] = None
    mux_api_url: str = MUX_ASSETS_URL

    # Maximum number of in-flight Firestore reads / FCM sends per invocation
    notification_concurrency: int = Field(default=10, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def has_mux_credentials(self) -> bool:
        return bool(self.mux_token_id and self.mux_token_secret)


def get_settings() -> Settings:
    """Load settings from the environment and .env, fresh on every call."""
    return Settings()
