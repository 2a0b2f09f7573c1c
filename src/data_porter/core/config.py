from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DATA_PORTER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # import specification defaults
    default_max_fetch_attempts: int = Field(default=5, ge=1)
    cache_by_default: bool = False

    # retry
    retry_delay_s: float = Field(default=1.0, ge=0.0)

    # built-in http provider
    http_base_url: str | None = None
    http_timeout_s: float = 30.0
    http_connect_timeout_s: float = 10.0

    log_level: str = "WARNING"

    # -----------------------------
    # Required-value helpers
    # -----------------------------

    def require_http_base_url(self) -> str:
        if not self.http_base_url:
            raise RuntimeError(
                "DATA_PORTER_HTTP_BASE_URL is not set. Set it in the environment or .env file."
            )
        return self.http_base_url


settings = Settings()
