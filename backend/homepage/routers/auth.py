"""
Authentication router for email checks, registration and login.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from homepage.schemas.auth import (
    CheckEmailResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from homepage.services.auth_service import AuthService
from homepage.dependencies.database import get_auth_service

router = APIRouter(
    prefix="/api/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get(
    "/check-email",
    response_model=CheckEmailResponse,
    summary="Check whether an email is registered",
)
async def check_email(
    email: Optional[str] = Query(None, description="Email address to check"),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Check if an email address is already in use.

    - **email**: Email address (case-insensitive)
    """
    exists = await auth_service.check_email_exists(email)
    return CheckEmailResponse(exists=exists)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user account.

    - **email**: Valid email address (must be unique)
    - **name**: Display name (2-50 characters)
    - **password**: Password (minimum 8 characters)
    - **address**: Optional postal address
    """
    user = await auth_service.register(
        email=body.email,
        name=body.name,
        password=body.password,
        address=body.address,
    )
    return RegisterResponse(user=user)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login and get a session token",
    responses={401: {"model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password to receive a JWT token.

    The token is valid for 1 day, or 30 days with **rememberMe**.
    """
    result = await auth_service.login(
        email=body.email,
        password=body.password,
        remember_me=body.remember_me,
    )
    return LoginResponse(
        token=result.token,
        expires_in=result.expires_in,
        user=result.user,
    )
