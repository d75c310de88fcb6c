"""
Configuration module.

Exports:
    get_settings: Function to get settings (for dependency injection)
    Settings: Settings model
    configure_logging: structlog setup shared by the app and scripts
"""

from config.settings import get_settings, Settings
from config.logging import configure_logging

__all__ = [
    # Settings
    "get_settings",
    "Settings",

    # Logging
    "configure_logging",
]
