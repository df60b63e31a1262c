"""
Authentication service for user registration and login.
"""
import logging
import re
from datetime import timedelta
from functools import lru_cache
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from homepage.config import Settings, get_settings
from homepage.core.exceptions import (
    AuthError,
    DatabaseConnectionError,
    DuplicateError,
    ValidationError,
)
from homepage.core.security import create_access_token, hash_password, verify_password
from homepage.database.connections import DatabaseConnection
from homepage.database.databases.site_db import (
    PUBLIC_USER_PROJECTION,
    Collections,
    UserFields,
)
from homepage.models.user import User, UserType
from homepage.schemas.auth import LoginResult, PublicUser, RecentUser

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50

# Compared against when no user matches so unknown emails cost a bcrypt check too
_UNKNOWN_USER_PASSWORD = "starbucks-unknown-user-password"


def normalize_email(email: str) -> str:
    """Emails are stored and compared trimmed and lowercased."""
    return email.strip().lower()


@lru_cache(maxsize=1)
def _unknown_user_hash() -> str:
    return hash_password(_UNKNOWN_USER_PASSWORD)


def _public_user(doc: dict[str, Any]) -> PublicUser:
    return PublicUser(
        id=str(doc[UserFields.ID]),
        email=doc[UserFields.EMAIL],
        name=doc[UserFields.NAME],
        user_type=doc.get(UserFields.USER_TYPE, UserType.CUSTOMER.value),
        address=doc.get(UserFields.ADDRESS),
        created_at=doc.get(UserFields.CREATED_AT),
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        db: Optional[AsyncIOMotorDatabase] = None,
        settings: Optional[Settings] = None,
        connection: Optional[DatabaseConnection] = None,
    ):
        """
        Initialize with the site database, or with the connection manager
        that provides it.

        With a connection the database handle is resolved on first store
        access, so input validation never depends on MongoDB being up.
        """
        self._db = db
        self._connection = connection
        self.settings = settings or get_settings()

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """
        Site database handle.

        Raises:
            DatabaseConnectionError: If MongoDB is not connected
        """
        if self._db is None:
            if self._connection is None:
                raise DatabaseConnectionError()
            self._db = self._connection.get_database()
        return self._db

    @property
    def users_collection(self):
        return self.db[Collections.USERS]

    def resolve_user_type(self, email: str) -> UserType:
        """Admin allow-list members become admins; everyone else is a customer."""
        if normalize_email(email) in self.settings.admin_email_list():
            return UserType.ADMIN
        return UserType.CUSTOMER

    async def check_email_exists(self, email: Optional[str]) -> bool:
        """
        Check whether an email is already registered.

        Raises:
            ValidationError: If email is missing
        """
        if not email or not email.strip():
            raise ValidationError("Please enter an email address")

        existing = await self.users_collection.find_one(
            {UserFields.EMAIL: normalize_email(email)},
            {UserFields.ID: 1},
        )
        return existing is not None

    async def register(
        self,
        email: Optional[str],
        name: Optional[str],
        password: Optional[str],
        address: Optional[str] = None,
    ) -> PublicUser:
        """
        Register a new user.

        Args:
            email: Email address (case-insensitive, unique)
            name: Display name, 2-50 characters after trimming
            password: Plain password, at least 8 characters
            address: Optional postal address

        Returns:
            Public fields of the created user

        Raises:
            ValidationError: If input is missing or malformed
            DuplicateError: If the email is already registered
        """
        # All input checks run before touching the database
        if not email or not name or not password:
            raise ValidationError("Please fill in all required fields")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        email = normalize_email(email)
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email address")

        name = name.strip()
        if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
            raise ValidationError(
                f"Name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters"
            )

        address = address.strip() if address and address.strip() else None

        # Fast path only; the unique index is authoritative
        if await self.users_collection.find_one({UserFields.EMAIL: email}, {UserFields.ID: 1}):
            raise DuplicateError()

        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            user_type=self.resolve_user_type(email),
            address=address,
        )
        document = user.to_document()

        try:
            result = await self.users_collection.insert_one(document)
        except DuplicateKeyError:
            raise DuplicateError()

        document[UserFields.ID] = result.inserted_id
        logger.info(f"Registered user {result.inserted_id} ({document[UserFields.USER_TYPE]})")
        return _public_user(document)

    async def login(
        self,
        email: Optional[str],
        password: Optional[str],
        remember_me: bool = False,
    ) -> LoginResult:
        """
        Authenticate a user and issue a session token.

        Args:
            email: Email address
            password: Plain password
            remember_me: Issue a 30 day token instead of a 1 day token

        Returns:
            LoginResult with the token and public user fields

        Raises:
            ValidationError: If email or password is missing
            AuthError: If the credentials do not match a user
        """
        if not email or not password:
            raise ValidationError("Please enter your email and password")

        # Only read path that loads the password hash
        user_doc = await self.users_collection.find_one({UserFields.EMAIL: normalize_email(email)})

        # Same error and same bcrypt cost for unknown email and wrong password
        if not user_doc:
            verify_password(password, _unknown_user_hash())
            raise AuthError()
        if not verify_password(password, user_doc.get(UserFields.PASSWORD_HASH, "")):
            raise AuthError()

        user = _public_user(user_doc)

        if remember_me:
            expires_delta = timedelta(days=self.settings.jwt_remember_me_expire_days)
        else:
            expires_delta = timedelta(days=self.settings.jwt_expire_days)

        token = create_access_token(
            {
                "userId": user.id,
                "email": user.email,
                "userType": user.user_type,
            },
            expires_delta,
            settings=self.settings,
        )

        return LoginResult(
            token=token,
            expires_in=int(expires_delta.total_seconds()),
            user=user,
        )

    async def count_users(self) -> int:
        """Total number of registered users."""
        return await self.users_collection.count_documents({})

    async def list_recent_users(self, limit: int = 5) -> list[RecentUser]:
        """
        Most recently registered users, newest first.

        Args:
            limit: Maximum number of users to return
        """
        cursor = (
            self.users_collection.find({}, PUBLIC_USER_PROJECTION)
            .sort(UserFields.CREATED_AT, -1)
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)
        return [
            RecentUser(
                email=doc[UserFields.EMAIL],
                name=doc[UserFields.NAME],
                user_type=doc.get(UserFields.USER_TYPE, UserType.CUSTOMER.value),
                created_at=doc.get(UserFields.CREATED_AT),
            )
            for doc in docs
        ]
