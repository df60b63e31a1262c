"""
Site database configuration.
Stores user identity and authentication data for the homepage.
"""


class Collections:
    """Collection names in the site database."""
    USERS = "users"


class UserFields:
    """Stored field names of a user document."""
    ID = "_id"
    EMAIL = "email"
    NAME = "name"
    PASSWORD_HASH = "password_hash"
    USER_TYPE = "user_type"
    ADDRESS = "address"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# Projection used by every read path except login
PUBLIC_USER_PROJECTION = {UserFields.PASSWORD_HASH: 0}
