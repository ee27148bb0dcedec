from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from clarity.config import Config
from clarity.core.core import Core
from clarity.core.modules.folder.models import Folder, FolderView
from clarity.core.modules.note.models import Note
from clarity.core.modules.session.models import AuthToken
from clarity.core.modules.storage.models import ObjectFileInfo
from clarity.core.modules.user.models import UserView
from clarity.errors import AuthenticationError


class App:
    """Facade for all application operations, resolves the caller before delegating to Core."""

    def __init__(self, config: Config, core: Core | None = None) -> None:
        self._core = core or Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Identity ===
    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return await self._core.services.session.is_auth_token_valid(auth_token)

    async def sign_up(self, email: str, password: str, display_name: str | None = None) -> UserView:
        """Register a new user."""
        user = await self._core.services.user.sign_up(email, password, display_name)
        return UserView.from_domain(user)

    async def login(self, email: str, password: str) -> AuthToken:
        """Authenticate user and create session."""
        user = await self._core.services.user.verify_password(email, password)
        if user is None:
            raise AuthenticationError("Invalid email or password")
        return await self._core.services.session.create_session(user.id)

    async def logout(self, auth_token: AuthToken) -> None:
        """Invalidate user session."""
        await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_user(self, auth_token: AuthToken) -> UserView:
        """Get current authenticated user profile."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return UserView.from_domain(current_user)

    # === Folders ===
    async def get_my_folders(self, auth_token: AuthToken, search: str | None = None) -> list[Folder]:
        """Root folders of the current user, or all of them matching a search term."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.folder.list_top_level_folders(current_user.id, search)

    async def get_public_folders(self, search: str | None = None) -> list[Folder]:
        """Public folders at any depth (anonymous access allowed)."""
        return await self._core.services.folder.list_public_folders(search)

    async def create_folder(
        self, auth_token: AuthToken, name: str, parent_id: UUID | None = None, is_public: bool = False
    ) -> Folder:
        """Create folder owned by current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.folder.create_folder(name, current_user.id, parent_id, is_public)

    async def get_child_folders(self, auth_token: AuthToken | None, folder_id: UUID) -> list[Folder]:
        """Subfolders of a readable folder."""
        viewer_id = await self._resolve_viewer_id(auth_token)
        await self._core.services.folder.get_visible_folder(folder_id, viewer_id)
        return await self._core.services.folder.list_child_folders(folder_id, viewer_id)

    async def get_folder_view(self, auth_token: AuthToken | None, folder_id: UUID) -> FolderView:
        """Folder with breadcrumbs, readable subfolders and readable notes."""
        viewer_id = await self._resolve_viewer_id(auth_token)
        folder = await self._core.services.folder.get_visible_folder(folder_id, viewer_id)
        return FolderView(
            folder=folder,
            path=await self._core.services.folder.get_folder_path(folder.id, viewer_id),
            is_owner=folder.is_owned_by(viewer_id),
            subfolders=await self._core.services.folder.list_child_folders(folder.id, viewer_id),
            notes=await self._core.services.note.list_notes(folder.id, viewer_id),
        )

    # === Notes ===
    async def get_notes_by_folder(self, auth_token: AuthToken, folder_id: UUID) -> list[Note]:
        """Notes of a folder visible to the current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.note.list_notes(folder_id, current_user.id)

    async def create_note(
        self,
        auth_token: AuthToken,
        folder_id: UUID,
        title: str,
        content: str | None = None,
        is_public: bool = False,
        file_url: str | None = None,
    ) -> Note:
        """Create note in a folder owned by current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.note.create_note(folder_id, current_user.id, title, content, is_public, file_url)

    async def get_note(self, auth_token: AuthToken | None, note_id: UUID) -> Note:
        """Get a note the caller can read (anonymous access allowed for public notes)."""
        viewer_id = await self._resolve_viewer_id(auth_token)
        return await self._core.services.note.fetch_note(note_id, viewer_id)

    async def update_note(self, auth_token: AuthToken, note_id: UUID, title: str, content: str | None) -> Note:
        """Update title and content of a note owned by current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.note.update_note(note_id, current_user.id, title, content)

    # === Attachments and files ===
    async def attach_file(
        self, auth_token: AuthToken, note_id: UUID, filename: str, content: bytes, mime_type: str | None
    ) -> Note:
        """Upload a PDF and bind it to a note owned by current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.attachment.attach_file(note_id, current_user.id, filename, content, mime_type)

    async def upload_pdf_note(
        self,
        auth_token: AuthToken,
        folder_id: UUID,
        filename: str,
        content: bytes,
        mime_type: str | None,
        is_public: bool = False,
    ) -> Note:
        """Create a note from an uploaded PDF in a folder owned by current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.attachment.upload_pdf_note(
            folder_id, current_user.id, filename, content, mime_type, is_public
        )

    def get_public_file(self, path: str) -> ObjectFileInfo:
        """Stored object from the public namespace."""
        return self._core.storage.open_public(path)

    def get_signed_file(self, token: str) -> ObjectFileInfo:
        """Stored object behind a valid signed token."""
        return self._core.storage.open_signed(token)

    # === AI ===
    async def ask_ai(self, prompt: str | None, file_url: str | None) -> str:
        """Forward a question (and optional document URL) to the language model."""
        return await self._core.services.ai.ask(prompt, file_url)

    # === Private resolver methods ===
    async def _resolve_viewer_id(self, auth_token: AuthToken | None) -> UUID | None:
        """Resolve optional auth token to viewer id; None for anonymous callers."""
        viewer = await self._core.services.access.get_viewer(auth_token)
        return viewer.id if viewer else None
