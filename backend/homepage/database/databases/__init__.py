"""
Database definitions and collection constants.
"""
from homepage.database.databases import site_db

__all__ = ["site_db"]
