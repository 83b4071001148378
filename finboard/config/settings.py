"""
Configuration Management for finboard

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The gateway settings describe the one external dependency (the ledger API);
the dashboard settings hold the timing and paging knobs the controllers use.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewaySettings(BaseSettings):
    """Ledger gateway (HTTP API) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINBOARD_GATEWAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the ledger API"
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent with every request"
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Per-request timeout"
    )

    # Retry policy for transient failures
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total attempts for retryable failures"
    )
    retry_min_wait_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Lower bound of the exponential backoff"
    )
    retry_max_wait_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Upper bound of the exponential backoff"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoints are joined with a leading slash."""
        return v.rstrip("/")


class DashboardSettings(BaseSettings):
    """
    Dashboard controller settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Debounce windows
    search_debounce_ms: int = Field(
        default=300,
        ge=0,
        le=5000,
        description="Delay before free-text search is applied"
    )
    range_debounce_ms: int = Field(
        default=300,
        ge=0,
        le=5000,
        description="Delay before a date range or month change triggers a refetch"
    )

    # Presentation limits
    page_size: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Transactions per page"
    )
    max_chart_dots: int = Field(
        default=30,
        ge=1,
        le=30,
        description="Maximum highlighted points on the net worth chart"
    )

    audit_history_size: int = Field(
        default=500,
        ge=0,
        description="How many audit events are kept in memory"
    )

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000

    @property
    def range_debounce_seconds(self) -> float:
        return self.range_debounce_ms / 1000


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def gateway(self) -> GatewaySettings:
        return GatewaySettings()

    @property
    def dashboard(self) -> DashboardSettings:
        return DashboardSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.gateway
        results["gateway"] = True
    except Exception as e:
        results["gateway"] = False
        results["gateway_error"] = str(e)

    try:
        _ = settings.dashboard
        results["dashboard"] = True
    except Exception as e:
        results["dashboard"] = False
        results["dashboard_error"] = str(e)

    return results
