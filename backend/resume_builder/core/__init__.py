"""
Core infrastructure: configuration, database, security, logging and the
service exception hierarchy.

Usage:
    from resume_builder.core import get_settings, ServiceError
    from resume_builder.core.database import get_db
    from resume_builder.core.security import get_current_user
"""

from .config import Settings, get_settings, settings
from .exceptions import (
    AIProcessingError,
    AuthenticationError,
    ConfigError,
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ResponseParseError,
    ServiceError,
    ValidationError,
)

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "ServiceError",
    "ValidationError",
    "ConfigError",
    "AIProcessingError",
    "ResponseParseError",
    "DuplicateError",
    "NotFoundError",
    "PermissionDeniedError",
    "AuthenticationError",
]
