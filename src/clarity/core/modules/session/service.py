import secrets
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from clarity.core.core import Service
from clarity.core.modules.session.models import AuthToken, Session
from clarity.core.modules.user.models import User
from clarity.errors import AuthenticationError, NotFoundError

SESSION_TTL_SECONDS = 30 * 24 * 60 * 60


class SessionService(Service):
    """Service for managing user sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        # TTL index for automatic session cleanup
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=SESSION_TTL_SECONDS)

    async def create_session(self, user_id: UUID) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        new_session = Session(user_id=user_id, auth_token=auth_token)
        await self._collection.insert_one(new_session.to_mongo())
        return auth_token

    async def get_authenticated_user(self, auth_token: AuthToken) -> User:
        session = await self._collection.find_one({"auth_token": auth_token})
        if session is None:
            raise AuthenticationError("Invalid or expired session")

        try:
            return await self.core.services.user.get_user(session["user_id"])
        except NotFoundError as e:
            raise AuthenticationError("Invalid or expired session") from e

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_user(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        await self._collection.delete_one({"auth_token": auth_token})
