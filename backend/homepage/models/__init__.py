"""
Pydantic models for database documents.
"""
from homepage.models.user import User, UserType

__all__ = [
    "User",
    "UserType",
]
