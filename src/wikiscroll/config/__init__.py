"""Configuration module for the WikiScroll edge service."""
from .settings import get_settings, Settings
from .logging_config import (
    setup_logging,
    get_service_logger,
    get_api_logger,
)

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_service_logger",
    "get_api_logger",
]
