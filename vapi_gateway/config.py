"""
Configuration management for the Vapi call gateway.

All settings are loaded from environment variables (or a local `.env` file)
and validated once at import time.

Design decisions:
- Pydantic Settings for automatic env var loading and validation
- Vapi credentials are optional here; an incomplete triple leaves the
  gateway running in "not configured" mode instead of refusing to start
- Properties for computed values (is_production, rate limits)
"""

from typing import Union

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.

    Configuration sections:
    1. Vapi AI - credential triple and upstream connection settings
    2. Datastore - property search database
    3. Application - runtime behavior configuration
    4. Server - HTTP server configuration
    5. Security - CORS and rate limiting settings
    """

    # ===== Vapi AI Configuration =====
    vapi_private_key: str | None = Field(
        default=None,
        description="Private API key for server-side Vapi calls (never sent to browsers)"
    )
    vapi_public_key: str | None = Field(
        default=None,
        description="Vapi public key for Web SDK and web-call creation"
    )
    vapi_assistant_id: str | None = Field(
        default=None,
        description="Default Vapi assistant ID"
    )
    vapi_phone_number_id: str | None = Field(
        default=None,
        description="Vapi phone number ID used for outbound phone calls (provider default when unset)"
    )
    vapi_base_url: str = Field(
        default="https://api.vapi.ai",
        description="Base URL for the Vapi API (scheme included)"
    )
    vapi_web_call_path: str = Field(
        default="/call/web",
        description="Upstream path used to create browser web calls"
    )
    vapi_timeout: float = Field(
        default=30.0,
        ge=5, le=120,
        description="HTTP timeout in seconds for Vapi API calls"
    )

    # ===== Datastore Configuration =====
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for the property datastore (search disabled when unset)"
    )

    # ===== Application Settings =====
    app_env: str = Field(
        default="development",
        pattern="^(development|staging|production|test)$",
        description="Application environment"
    )
    log_level: str = Field(
        default="info",
        pattern="^(debug|info|warning|error|critical)$",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        pattern="^(json|console)$",
        description="Log output format (json for prod, console for dev)"
    )
    static_dir: str = Field(
        default="client",
        description="Directory holding the browser client"
    )

    # ===== Server Configuration =====
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind host"
    )
    server_port: int = Field(
        default=3000,
        ge=1, le=65535,
        description="Server port"
    )

    # ===== Security Configuration =====
    cors_origins: Union[str, list[str]] = Field(
        default="",
        description="Allowed CORS origins - comma-separated string or list"
    )
    api_rate_limit: int | None = Field(
        default=None,
        ge=1,
        description="Requests per 15 minutes per IP on /api/ (environment default when unset)"
    )
    call_rate_limit: int = Field(
        default=10,
        ge=1,
        description="Call creation attempts per minute per IP"
    )

    @field_validator("vapi_base_url")
    @classmethod
    def validate_vapi_base_url(cls, v: str) -> str:
        """Require a full URL so the host is never resolved as a bare name."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("vapi_base_url must include the scheme, e.g. https://api.vapi.ai")
        return v.rstrip("/")

    @field_validator("vapi_web_call_path")
    @classmethod
    def validate_web_call_path(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"

    @model_validator(mode="after")
    def parse_cors_origins(self):
        """Parse cors_origins from string to list and validate."""
        cors_value = self.cors_origins
        if isinstance(cors_value, str):
            self.cors_origins = [origin.strip() for origin in cors_value.split(",") if origin.strip()]

        if self.app_env == "production" and "*" in self.cors_origins:
            raise ValueError("CORS wildcard not allowed in production")

        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def general_rate_limit(self) -> int:
        """Requests allowed per window on /api/ routes."""
        if self.api_rate_limit is not None:
            return self.api_rate_limit
        return 100 if self.is_production else 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )


# Singleton instance - loaded once at module import
settings = Settings()
