from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from clarity.core.core import Service
from clarity.core.modules.note.models import Note
from clarity.core.modules.note.visibility import NOTE_SORT, build_notes_query, can_view_note
from clarity.errors import AccessDeniedError, NotFoundError, ValidationError
from clarity.utils import now

logger = structlog.get_logger(__name__)

NOTE_HIDDEN_MESSAGE = "Note not found or access denied"


class NoteService(Service):
    """Notes inside folders, with per-note visibility."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("notes")

    async def on_start(self) -> None:
        """Create indexes for folder listing and owner lookup."""
        await self._collection.create_index([("folder_id", 1), ("created_at", -1)])
        await self._collection.create_index([("user_id", 1)])

    async def get_note(self, note_id: UUID) -> Note:
        """Get note by ID without access checks."""
        doc = await self._collection.find_one({"_id": note_id})
        if not doc:
            raise NotFoundError(NOTE_HIDDEN_MESSAGE)
        return Note.model_validate(doc)

    async def list_notes(self, folder_id: UUID, viewer_id: UUID | None) -> list[Note]:
        """Notes in a folder the viewer can read, newest first.

        The folder owner sees every note; anyone else sees public notes and their own.
        A folder the viewer cannot read raises the same NotFoundError as a missing one.
        Folder ownership is read on every call.
        """
        folder = await self.core.services.folder.get_visible_folder(folder_id, viewer_id)
        query = build_notes_query(folder.id, folder.user_id, viewer_id)
        cursor = self._collection.find(query).sort(NOTE_SORT)
        items = await Note.list_cursor(cursor)
        logger.debug("list_notes", folder_id=folder_id, viewer_id=viewer_id, returned=len(items))
        return items

    async def create_note(
        self,
        folder_id: UUID,
        owner_id: UUID,
        title: str,
        content: str | None = None,
        is_public: bool = False,
        file_url: str | None = None,
    ) -> Note:
        """Create a note in a folder owned by owner_id."""
        title = title.strip()
        if not title:
            raise ValidationError("Note title cannot be empty")

        folder = await self.core.services.folder.get_visible_folder(folder_id, owner_id)
        if not folder.is_owned_by(owner_id):
            raise AccessDeniedError("Notes can only be created by the folder owner")

        note = Note(
            folder_id=folder_id,
            user_id=owner_id,
            title=title,
            content=content,
            file_url=file_url,
            is_public=is_public,
        )
        await self._collection.insert_one(note.to_mongo())
        logger.debug("create_note", note_id=note.id, folder_id=folder_id, is_public=is_public)
        return note

    async def fetch_note(self, note_id: UUID, viewer_id: UUID | None) -> Note:
        """Get a note the viewer can read.

        Hidden notes raise the same NotFoundError as missing ones.
        """
        note = await self.get_note(note_id)
        folder_owner_id = await self._get_folder_owner_id(note)
        if not can_view_note(note, folder_owner_id, viewer_id):
            raise NotFoundError(NOTE_HIDDEN_MESSAGE)
        return note

    async def update_note(self, note_id: UUID, viewer_id: UUID, title: str, content: str | None) -> Note:
        """Replace title and content of a note owned by the viewer. Last write wins."""
        note = await self.fetch_note(note_id, viewer_id)
        if note.user_id != viewer_id:
            raise AccessDeniedError("Only the note owner can edit this note")

        title = title.strip()
        if not title:
            raise ValidationError("Note title cannot be empty")

        await self._collection.update_one(
            {"_id": note_id}, {"$set": {"title": title, "content": content, "edited_at": now()}}
        )
        return await self.get_note(note_id)

    async def set_file_url(self, note_id: UUID, file_url: str) -> Note:
        """Store the attachment reference on a note."""
        await self._collection.update_one({"_id": note_id}, {"$set": {"file_url": file_url}})
        return await self.get_note(note_id)

    async def _get_folder_owner_id(self, note: Note) -> UUID | None:
        try:
            folder = await self.core.services.folder.get_folder(note.folder_id)
        except NotFoundError:
            return None
        return folder.user_id
