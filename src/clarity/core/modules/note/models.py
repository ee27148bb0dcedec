from datetime import datetime
from uuid import UUID

from pydantic import Field

from clarity.core.db import MongoModel
from clarity.utils import now


class Note(MongoModel):
    """Titled unit of content stored in a folder: rich text, an attached file, or both."""

    folder_id: UUID
    user_id: UUID  # Owner
    title: str
    content: str | None = None
    file_url: str | None = None  # Public or signed URL of the attached file
    is_public: bool = False
    created_at: datetime = Field(default_factory=now)
    edited_at: datetime | None = None  # Last title/content edit
