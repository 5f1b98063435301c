"""
Core module initialization.
Exports configuration, logging utilities and service errors.
"""

from app.core.config import get_settings, Settings, EnvironmentMode
from app.core.exceptions import (
    ServiceError,
    NotFoundError,
    RestaurantNotFoundError,
    MenuNotFoundError,
    ValidationFailure,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "ServiceError",
    "NotFoundError",
    "RestaurantNotFoundError",
    "MenuNotFoundError",
    "ValidationFailure",
]
