from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    app_env: str = Field(default="development", alias="APP_ENV")

    http_timeout: int = Field(default=20, alias="HTTP_TIMEOUT")
    http_retries: int = Field(default=3, alias="HTTP_RETRIES")

    google_client_id: str | None = Field(default=None, alias="GOOGLE_CLIENT_ID")
    google_client_secret: str | None = Field(default=None, alias="GOOGLE_CLIENT_SECRET")
    google_auth_url: str = Field(
        default="https://accounts.google.com/o/oauth2/v2/auth", alias="GOOGLE_AUTH_URL"
    )
    google_token_url: str = Field(
        default="https://oauth2.googleapis.com/token", alias="GOOGLE_TOKEN_URL"
    )

    search_console_base_url: str = Field(
        default="https://searchconsole.googleapis.com/v1", alias="SEARCH_CONSOLE_BASE_URL"
    )
    webmasters_base_url: str = Field(
        default="https://www.googleapis.com/webmasters/v3", alias="WEBMASTERS_BASE_URL"
    )
    search_console_window_days: int = Field(default=7, alias="SEARCH_CONSOLE_WINDOW_DAYS")
    search_console_row_limit: int = Field(default=500, alias="SEARCH_CONSOLE_ROW_LIMIT")

    pagespeed_base_url: str = Field(
        default="https://www.googleapis.com/pagespeedonline/v5/runPagespeed",
        alias="PAGESPEED_BASE_URL",
    )
    pagespeed_api_key: str | None = Field(default=None, alias="PAGESPEED_API_KEY")
    pagespeed_delay_seconds: float = Field(default=1.0, alias="PAGESPEED_DELAY_SECONDS")

    scheduler_tz: str = Field(default="UTC", alias="SCHEDULER_TZ")
    warmup_delay_minutes: int = Field(default=5, alias="WARMUP_DELAY_MINUTES")
    update_interval_hours: int = Field(default=24, alias="UPDATE_INTERVAL_HOURS")
    scheduler_lease_enabled: bool = Field(default=True, alias="SCHEDULER_LEASE_ENABLED")
    scheduler_lease_slack_minutes: int = Field(default=30, alias="SCHEDULER_LEASE_SLACK_MINUTES")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")
    log_dir: str = Field(default="logs", alias="LOG_DIR")

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
