# src/settings.py
from __future__ import annotations

import json
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    # Application
    app_name: str = Field(default="saas-metrics-dashboard-api", env="APP_NAME")
    app_version: str = Field(default="0.1.0", env="APP_VERSION")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_ORIGINS")
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_METHODS")
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_HEADERS")
    cors_allow_credentials: bool = Field(default=False, env="CORS_ALLOW_CREDENTIALS")

    # Upstream HTTP behaviour
    http_timeout: float = Field(default=10.0, env="HTTP_TIMEOUT")

    # YouTube Data API
    google_api_key: Optional[str] = Field(default=None, env="GOOGLE_API_KEY")
    youtube_api_key: Optional[str] = Field(default=None, env="YOUTUBE_API_KEY")
    youtube_channel_id: Optional[str] = Field(default=None, env="YOUTUBE_CHANNEL_ID")

    # Mailchimp
    mailchimp_server: Optional[str] = Field(default=None, env="MAILCHIMP_SERVER")
    mailchimp_list_id: Optional[str] = Field(default=None, env="MAILCHIMP_LIST_ID")
    mailchimp_api_key: Optional[str] = Field(default=None, env="MAILCHIMP_API_KEY")

    # Memberful
    memberful_subdomain: Optional[str] = Field(default=None, env="MEMBERFUL_SUBDOMAIN")
    memberful_api_key: Optional[str] = Field(default=None, env="MEMBERFUL_API_KEY")
    # Fixed page size, no cursor pagination
    memberful_page_size: int = Field(default=1000, env="MEMBERFUL_PAGE_SIZE")

    # Discord
    discord_guild_id: Optional[str] = Field(default=None, env="DISCORD_GUILD_ID")
    discord_bot_token: Optional[str] = Field(default=None, env="DISCORD_BOT_TOKEN")

    # Google Analytics (service account)
    ga_client_email: Optional[str] = Field(default=None, env="GA_CLIENT_EMAIL")
    ga_private_key: Optional[str] = Field(default=None, env="GA_PRIVATE_KEY")
    ga_property_id: Optional[str] = Field(default=None, env="GA_PROPERTY_ID")

    # Mock data for the membership source
    use_mock_data: bool = Field(default=False, env="USE_MOCK_DATA")
    mock_seed: int = Field(default=0, env="MOCK_SEED")
    mock_subscriptions: int = Field(default=250, env="MOCK_SUBSCRIPTIONS")

    # History log and dashboard assets
    history_file: str = Field(default="data/history.json", env="HISTORY_FILE")
    static_dir: str = Field(default="public", env="STATIC_DIR")

    # Celery
    celery_broker_url: Optional[str] = Field(default=None, env="CELERY_BROKER_URL")
    celery_result_backend: Optional[str] = Field(default=None, env="CELERY_RESULT_BACKEND")
    celery_task_default_queue: str = Field(default="default", env="CELERY_TASK_DEFAULT_QUEUE")
    # Periodic snapshot capture; disabled when unset
    snapshot_interval_seconds: Optional[float] = Field(default=None, env="SNAPSHOT_INTERVAL_SECONDS")

    # Host / Port for serving the app
    host: str = Field(default="0.0.0.0", env="HOST")
    port: int = Field(default=5000, env="PORT")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file="../.env",  # Look for .env in parent directory
        env_file_encoding="utf-8",
        protected_namespaces=(),
        validate_default=True,
        extra="ignore",
    )

    @property
    def youtube_key(self) -> Optional[str]:
        return self.google_api_key or self.youtube_api_key

    @staticmethod
    def _parse_list(value: object) -> List[str]:
        """
        Accept JSON array, '*' literal, or comma-separated string.
        Always returns a list of stripped strings. Empty parts are discarded.
        """
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if str(v).strip()]
        if isinstance(value, str):
            s = value.strip()
            if s == "*":
                return ["*"]
            # JSON array if it looks like one
            if s.startswith("[") and s.endswith("]"):
                try:
                    parsed = json.loads(s)
                    if not isinstance(parsed, list):
                        raise ValueError("Expected JSON array")
                    return [str(v).strip() for v in parsed if str(v).strip()]
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON array: {e}") from e
            # Fallback: CSV
            return [part.strip() for part in s.split(",") if part.strip()]
        # Anything else is invalid
        raise TypeError(f"Unsupported list value type: {type(value).__name__}")

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _lists_from_env(cls, v: object) -> List[str]:
        return cls._parse_list(v)

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        x = (v or "INFO").upper()
        # Align with standard levels
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
        if x not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(valid)}")
        return x

    @field_validator("memberful_page_size", mode="after")
    @classmethod
    def _positive_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MEMBERFUL_PAGE_SIZE must be at least 1")
        return v


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
