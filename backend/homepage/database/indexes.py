"""
Index management.
Ensures the indexes the application relies on exist on startup.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from homepage.database.databases.site_db import Collections, UserFields

logger = logging.getLogger(__name__)


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create necessary indexes for the site database."""
    users = db[Collections.USERS]
    # Authoritative guard against duplicate registrations
    await users.create_index(UserFields.EMAIL, unique=True)
    await users.create_index([(UserFields.CREATED_AT, DESCENDING)])
    logger.info("Database indexes ensured")
