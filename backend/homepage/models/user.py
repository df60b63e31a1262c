"""
User model for the site database.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserType(str, Enum):
    """User account types."""
    CUSTOMER = "customer"
    ADMIN = "admin"
    SELLER = "seller"


class User(BaseModel):
    """
    User document model for the users collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    email: str = Field(..., description="Unique lowercase email address")
    name: str = Field(..., min_length=2, max_length=50, description="Display name")
    password_hash: str = Field(..., description="Bcrypt hashed password")
    user_type: UserType = Field(
        default=UserType.CUSTOMER,
        description="Account type"
    )
    address: Optional[str] = Field(None, description="Postal address")
    created_at: datetime = Field(
        default_factory=utcnow,
        description="Account creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp"
    )

    class Config:
        populate_by_name = True
        use_enum_values = True

    def to_document(self) -> dict:
        """Document ready for insertion (no _id)."""
        return self.model_dump(exclude={"id"})
