"""Folder models and the query specification used to list them."""

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from clarity.core.db import MongoModel
from clarity.core.modules.note.models import Note
from clarity.utils import now


class Folder(MongoModel):
    """Named container for notes, owned by one user, optionally public-readable."""

    name: str
    parent_id: UUID | None = None  # None for root-level folders
    is_public: bool = False
    user_id: UUID  # Owner
    created_at: datetime = Field(default_factory=now)

    def is_owned_by(self, viewer_id: UUID | None) -> bool:
        return viewer_id is not None and self.user_id == viewer_id

    def is_visible_to(self, viewer_id: UUID | None) -> bool:
        return self.is_public or self.is_owned_by(viewer_id)


class OwnerScope(BaseModel):
    """Folders owned by one user."""

    scope: Literal["owner"] = "owner"
    owner_id: UUID


class PublicScope(BaseModel):
    """Folders anyone can read."""

    scope: Literal["public"] = "public"


class VisibleScope(BaseModel):
    """Folders a viewer can read: their own plus public ones. Anonymous viewers get public only."""

    scope: Literal["visible"] = "visible"
    viewer_id: UUID | None = None


FolderScope = Annotated[OwnerScope | PublicScope | VisibleScope, Field(discriminator="scope")]


class FolderQuery(BaseModel):
    """Explicit specification of a folder listing."""

    scope: FolderScope
    parent_id: UUID | None = None  # None selects root-level folders
    any_depth: bool = False  # Ignore parent_id and match folders at every level
    search: str | None = None  # Case-insensitive substring of the name


class FolderView(BaseModel):
    """Everything the folder page renders in one response."""

    folder: Folder
    path: list[Folder] = Field(..., description="Ancestors from the root down to and including this folder")
    is_owner: bool
    subfolders: list[Folder]
    notes: list[Note]
