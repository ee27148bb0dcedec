"""Read-access policy for notes.

A note is visible to a viewer who owns it, who owns its folder, or to anyone
when the note itself is public. Folder visibility does not widen or narrow
note visibility.
"""

from typing import Any
from uuid import UUID

from clarity.core.modules.note.models import Note

# Newest first; _id breaks ties
NOTE_SORT: list[tuple[str, int]] = [("created_at", -1), ("_id", -1)]


def can_view_note(note: Note, folder_owner_id: UUID | None, viewer_id: UUID | None) -> bool:
    if note.is_public:
        return True
    if viewer_id is None:
        return False
    return viewer_id in (note.user_id, folder_owner_id)


def build_notes_query(folder_id: UUID, folder_owner_id: UUID, viewer_id: UUID | None) -> dict[str, Any]:
    """Build the MongoDB filter for the notes of a folder as seen by a viewer."""
    if viewer_id is not None and viewer_id == folder_owner_id:
        return {"folder_id": folder_id}
    if viewer_id is None:
        return {"folder_id": folder_id, "is_public": True}
    return {"folder_id": folder_id, "$or": [{"is_public": True}, {"user_id": viewer_id}]}
