"""
Database module - MongoDB connection management and collection definitions.
"""
from homepage.database.connections import (
    ConnectionInfo,
    ConnectionState,
    DatabaseConnection,
    mask_connection_string,
    select_connection_string,
)
from homepage.database.databases import site_db
from homepage.database.indexes import create_indexes

__all__ = [
    "ConnectionInfo",
    "ConnectionState",
    "DatabaseConnection",
    "mask_connection_string",
    "select_connection_string",
    "create_indexes",
    "site_db",
]
