"""Configuration package."""

from finboard.config.settings import (
    DashboardSettings,
    GatewaySettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DashboardSettings",
    "GatewaySettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
