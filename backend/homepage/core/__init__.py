"""
Core module - Exceptions, security and logging utilities.
"""
from homepage.core.exceptions import (
    AuthError,
    ConfigurationError,
    DatabaseConnectionError,
    DuplicateError,
    HomepageError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AuthError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "DuplicateError",
    "HomepageError",
    "NotFoundError",
    "ValidationError",
]
