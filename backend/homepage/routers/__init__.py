"""
API Routers module.
"""
from homepage.routers import auth, health, pages

__all__ = ["auth", "health", "pages"]
