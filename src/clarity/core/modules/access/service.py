from clarity.core.core import Service
from clarity.core.modules.session.models import AuthToken
from clarity.core.modules.user.models import User


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken) -> User:
        """Ensure the user is authenticated."""
        return await self.core.services.session.get_authenticated_user(auth_token)

    async def get_viewer(self, auth_token: AuthToken | None) -> User | None:
        """Resolve the viewer for read operations; None means anonymous."""
        if auth_token is None:
            return None
        return await self.core.services.session.get_authenticated_user(auth_token)
