"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from homepage.core.exceptions import ConfigurationError

# Repository root (backend/homepage/config.py -> ../../..)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Used only when JWT_SECRET is not configured outside production
INSECURE_JWT_SECRET = "starbucks-secret-key-change-in-production"


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # MongoDB endpoints (Atlas first, then local)
    mongo_atlas_uri: Optional[str] = None
    mongodb_uri: Optional[str] = None
    mongo_db_name: str = "starbucks"
    mongo_max_retries: int = 3
    mongo_server_selection_timeout_ms: int = 10000
    mongo_socket_timeout_ms: int = 45000
    mongo_min_pool_size: int = 2
    mongo_max_pool_size: int = 10

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    # Unset means neither development nor production: strict startup
    environment: Optional[str] = None
    cors_origin: str = "http://localhost:3000,http://localhost:8000"
    static_dir: Path = PROJECT_ROOT / "static"
    shutdown_grace_seconds: float = 10.0
    log_level: str = "INFO"

    # JWT Configuration
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 1
    jwt_remember_me_expire_days: int = 30

    # Comma-separated emails promoted to admin on registration
    admin_emails: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def environment_name(self) -> str:
        return (self.environment or "").strip().lower()

    @property
    def environment_label(self) -> str:
        """Environment name as reported by the API; defaults to development."""
        return (self.environment or "").strip() or "development"

    @property
    def is_production(self) -> bool:
        return self.environment_name == "production"

    @property
    def is_development(self) -> bool:
        """Only an explicit ENVIRONMENT=development enables degraded startup."""
        return self.environment_name == "development"

    def cors_origins(self) -> list[str]:
        """CORS allow-list parsed from the comma-separated setting."""
        return _split_csv(self.cors_origin)

    def admin_email_list(self) -> list[str]:
        """Lowercased admin allow-list."""
        return [email.lower() for email in _split_csv(self.admin_emails)]

    def signing_secret(self) -> str:
        """
        Secret used to sign session tokens.

        Raises:
            ConfigurationError: If JWT_SECRET is unset in production or when
                ENVIRONMENT is not set
        """
        if self.jwt_secret and self.jwt_secret.strip():
            return self.jwt_secret.strip()
        if self.is_production:
            raise ConfigurationError("JWT_SECRET must be configured in production")
        if not self.environment_name:
            raise ConfigurationError("JWT_SECRET must be configured when ENVIRONMENT is not set")
        return INSECURE_JWT_SECRET


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
