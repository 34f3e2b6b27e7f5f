"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseModel):
    """Backing store configuration.

    The backing store is a PostgREST-style relational service. Tables are
    exposed under ``{base_url}/rest/v1`` and stored procedures under
    ``{base_url}/rest/v1/rpc``.
    """

    base_url: str = "http://localhost:54321"
    api_key: str = "CHANGE_ME_IN_PRODUCTION"
    timeout: float = 30.0

    @computed_field
    @property
    def rest_url(self) -> str:
        """Base URL for table endpoints."""
        return f"{self.base_url.rstrip('/')}/rest/v1"


class EngineSettings(BaseModel):
    """Comment engine behaviour."""

    # Grouped notification preview length (an ellipsis is appended when cut)
    preview_length: int = 30

    # How long a deep-linked comment stays highlighted
    highlight_dwell_seconds: float = 3.0

    # First path segment of post deep links (/<post_route>/<post_id>)
    post_route: str = "event"

    # Display name used when an author profile cannot be resolved
    unknown_author: str = "Unknown"

    # Polling interval for the REST comment feed
    poll_interval_seconds: float = 2.0


class NotificationSettings(BaseModel):
    """Notification sink configuration."""

    # Newest notifications kept per recipient by the in-memory sink
    retention: int = 100


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, using ``__`` for nested values:

        BACKEND__BASE_URL=https://project.example.co
        BACKEND__API_KEY=...
        ENGINE__HIGHLIGHT_DWELL_SECONDS=2.5
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows BACKEND__BASE_URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    backend: BackendSettings = BackendSettings()
    engine: EngineSettings = EngineSettings()
    notifications: NotificationSettings = NotificationSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
