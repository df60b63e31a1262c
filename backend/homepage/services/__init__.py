"""
Service layer for business logic.
"""
from homepage.services.auth_service import AuthService

__all__ = [
    "AuthService",
]
