from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from clarity.core.core import Service
from clarity.core.modules.folder.hierarchy import visible_tail, walk_to_root
from clarity.core.modules.folder.models import Folder, FolderQuery, OwnerScope, PublicScope, VisibleScope
from clarity.core.modules.folder.query_builder import FOLDER_SORT, build_folder_query
from clarity.errors import AccessDeniedError, NotFoundError, ValidationError
from clarity.utils import clean_search_term

logger = structlog.get_logger(__name__)


class FolderService(Service):
    """Folder hierarchy with owner/public visibility."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("folders")

    async def on_start(self) -> None:
        """Create indexes for hierarchy and listing queries."""
        await self._collection.create_index([("parent_id", 1), ("created_at", -1)])
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])
        await self._collection.create_index([("is_public", 1), ("created_at", -1)])

    async def find_folders(self, query: FolderQuery) -> list[Folder]:
        """Run a folder query specification, newest first."""
        mongo_query = build_folder_query(query)
        cursor = self._collection.find(mongo_query).sort(FOLDER_SORT)
        items = await Folder.list_cursor(cursor)
        logger.debug("find_folders", query=mongo_query, returned=len(items))
        return items

    async def get_folder(self, folder_id: UUID) -> Folder:
        """Get folder by ID."""
        doc = await self._collection.find_one({"_id": folder_id})
        if not doc:
            raise NotFoundError(f"Folder not found: {folder_id}")
        return Folder.model_validate(doc)

    async def get_visible_folder(self, folder_id: UUID, viewer_id: UUID | None) -> Folder:
        """Get folder by ID if the viewer may read it; hidden folders look missing."""
        folder = await self.get_folder(folder_id)
        if not folder.is_visible_to(viewer_id):
            raise NotFoundError(f"Folder not found: {folder_id}")
        return folder

    async def get_folder_path(self, folder_id: UUID, viewer_id: UUID | None) -> list[Folder]:
        """Ancestors down to and including the folder, starting below the deepest one the viewer cannot read."""
        return visible_tail(await walk_to_root(folder_id, self.get_folder), viewer_id)

    async def list_child_folders(self, parent_id: UUID | None, viewer_id: UUID | None) -> list[Folder]:
        """Folders directly under parent_id (root level for None) that the viewer can read."""
        return await self.find_folders(FolderQuery(scope=VisibleScope(viewer_id=viewer_id), parent_id=parent_id))

    async def list_top_level_folders(self, viewer_id: UUID, search: str | None = None) -> list[Folder]:
        """Viewer's root folders, or all of the viewer's folders at any depth matching a search term."""
        search = clean_search_term(search)
        return await self.find_folders(
            FolderQuery(scope=OwnerScope(owner_id=viewer_id), any_depth=search is not None, search=search)
        )

    async def list_public_folders(self, search: str | None = None) -> list[Folder]:
        """Every public folder at any depth, optionally filtered by name."""
        return await self.find_folders(FolderQuery(scope=PublicScope(), any_depth=True, search=clean_search_term(search)))

    async def create_folder(self, name: str, owner_id: UUID, parent_id: UUID | None = None, is_public: bool = False) -> Folder:
        """Create a folder at root level or below a folder the owner owns."""
        name = name.strip()
        if not name:
            raise ValidationError("Folder name cannot be empty")

        if parent_id is not None:
            parent = await self.get_visible_folder(parent_id, owner_id)
            if not parent.is_owned_by(owner_id):
                raise AccessDeniedError("Subfolders can only be created by the parent folder owner")

        folder = Folder(name=name, parent_id=parent_id, is_public=is_public, user_id=owner_id)
        await self._collection.insert_one(folder.to_mongo())
        logger.debug("create_folder", folder_id=folder.id, parent_id=parent_id, is_public=is_public)
        return folder
