"""
Security utilities for password hashing and JWT session tokens.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from homepage.config import Settings, get_settings

# Password hashing context using bcrypt (10 rounds)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed hash stored for this user
        return False


def create_access_token(
    claims: dict[str, Any],
    expires_delta: timedelta,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a signed JWT session token.

    Args:
        claims: Identity claims (userId, email, userType)
        expires_delta: Token lifetime
        settings: Optional settings override

    Returns:
        Encoded JWT token string
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        **claims,
        "iat": now,
        "exp": now + expires_delta,
    }
    if "userId" in claims:
        payload.setdefault("sub", str(claims["userId"]))

    return jwt.encode(
        payload,
        settings.signing_secret(),
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str, settings: Optional[Settings] = None) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT token string to decode
        settings: Optional settings override

    Returns:
        Decoded payload dictionary

    Raises:
        JWTError: If token is invalid or expired
    """
    settings = settings or get_settings()
    return jwt.decode(
        token,
        settings.signing_secret(),
        algorithms=[settings.jwt_algorithm],
    )


__all__ = [
    "JWTError",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
