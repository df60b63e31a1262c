"""
Application exceptions.

Each exception carries the HTTP status code it maps to when it reaches
the top-level handler in ``homepage.main``.
"""


class HomepageError(Exception):
    """Base exception for all homepage backend errors."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(HomepageError):
    """Missing or malformed input."""

    def __init__(self, message: str = "Please fill in all required fields"):
        super().__init__(message, status_code=400)


class DuplicateError(HomepageError):
    """Email already registered."""

    def __init__(self, message: str = "This email is already in use"):
        super().__init__(message, status_code=400)


class AuthError(HomepageError):
    """Bad credentials. The message never says which part was wrong."""

    def __init__(self, message: str = "Email or password is incorrect"):
        super().__init__(message, status_code=401)


class NotFoundError(HomepageError):
    """Requested resource does not exist."""

    def __init__(self, message: str = "The requested resource could not be found"):
        super().__init__(message, status_code=404)


class DatabaseConnectionError(HomepageError):
    """MongoDB is unreachable."""

    def __init__(self, message: str = "Database connection is not available"):
        super().__init__(message, status_code=500)


class ConfigurationError(HomepageError):
    """Invalid server configuration."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)
