from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from clarity.core.core import Service
from clarity.core.modules.user.models import User
from clarity.core.modules.user.validators import normalize_email, validate_password
from clarity.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Identity adapter: registered users and password verification."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        await self._collection.create_index([("email", 1)], unique=True)

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID."""
        doc = await self._collection.find_one({"_id": user_id})
        if doc is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return User.model_validate(doc)

    async def find_user_by_email(self, email: str) -> User | None:
        doc = await self._collection.find_one({"email": email.strip().lower()})
        return User.model_validate(doc) if doc else None

    async def sign_up(self, email: str, password: str, display_name: str | None = None) -> User:
        """Register a user with a bcrypt-hashed password."""
        email = normalize_email(email)
        validate_password(password)
        if await self.find_user_by_email(email) is not None:
            raise ValidationError(f"User '{email}' already exists")

        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        user = User(email=email, display_name=(display_name or "").strip() or None, password_hash=password_hash)
        await self._collection.insert_one(user.to_mongo())
        logger.info("user_signed_up", user_id=user.id)
        return user

    async def verify_password(self, email: str, password: str) -> User | None:
        """Return the user when the password matches, otherwise None."""
        user = await self.find_user_by_email(email)
        if user is None:
            return None
        if not bcrypt.checkpw(password.encode("utf-8"), user.password_hash.encode("utf-8")):
            return None
        return user
