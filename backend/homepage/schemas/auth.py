"""
Authentication request/response schemas.

Request fields are optional at the schema level so that missing values
reach AuthService, which reports them as a 400 validation error.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from homepage.models.user import UserType


class RegisterRequest(BaseModel):
    """Registration request body."""
    email: Optional[str] = Field(None, description="User email address")
    name: Optional[str] = Field(None, description="Display name (2-50 characters)")
    password: Optional[str] = Field(None, description="Password (min 8 characters)")
    address: Optional[str] = Field(None, description="Optional postal address")


class LoginRequest(BaseModel):
    """Login request body."""
    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")
    remember_me: bool = Field(
        default=False,
        alias="rememberMe",
        description="Issue a 30 day token instead of a 1 day token"
    )

    class Config:
        populate_by_name = True


class PublicUser(BaseModel):
    """User fields safe to return to clients (never the password hash)."""
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    user_type: UserType = Field(..., alias="userType", description="Account type")
    address: Optional[str] = Field(None, description="Postal address")
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="Account creation date")

    class Config:
        populate_by_name = True
        use_enum_values = True


class RecentUser(BaseModel):
    """Summary row for the database status listing."""
    email: str
    name: str
    user_type: UserType = Field(..., alias="userType")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True
        use_enum_values = True


class LoginResult(BaseModel):
    """Outcome of a successful login."""
    token: str
    expires_in: int
    user: PublicUser


class RegisterResponse(BaseModel):
    """Registration response."""
    success: bool = True
    message: str = "Registration completed successfully"
    user: PublicUser


class LoginResponse(BaseModel):
    """Login response with JWT token."""
    success: bool = True
    message: str = "Login successful"
    token: str = Field(..., description="JWT session token")
    expires_in: int = Field(..., alias="expiresIn", description="Token lifetime in seconds")
    user: PublicUser

    class Config:
        populate_by_name = True


class CheckEmailResponse(BaseModel):
    """Email availability response."""
    success: bool = True
    exists: bool


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing route."""
    success: bool = False
    message: str
