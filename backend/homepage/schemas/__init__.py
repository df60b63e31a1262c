"""
Request and response schemas for API endpoints.
"""
from homepage.schemas.auth import (
    CheckEmailResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    LoginResult,
    PublicUser,
    RecentUser,
    RegisterRequest,
    RegisterResponse,
)

__all__ = [
    "CheckEmailResponse",
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "LoginResult",
    "PublicUser",
    "RecentUser",
    "RegisterRequest",
    "RegisterResponse",
]
