from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from clarity.core.db import MongoModel
from clarity.utils import now


class User(MongoModel):
    """User identity with credentials."""

    email: str  # Lower-cased, unique
    display_name: str | None = None
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    display_name: str | None = Field(None, description="Optional display name")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, display_name=user.display_name)
