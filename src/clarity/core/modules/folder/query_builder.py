"""Pure functions for building MongoDB queries from folder query specifications."""

import re
from typing import Any

from clarity.core.modules.folder.models import FolderQuery, FolderScope, OwnerScope, PublicScope, VisibleScope

# Newest first; _id breaks ties so repeated listings come back in the same order
FOLDER_SORT: list[tuple[str, int]] = [("created_at", -1), ("_id", -1)]


def build_contains_condition(search: str) -> dict[str, Any]:
    """Case-insensitive literal substring match."""
    return {"$regex": re.escape(search), "$options": "i"}


def build_scope_condition(scope: FolderScope) -> dict[str, Any]:
    """Translate a scope variant into a MongoDB condition."""
    if isinstance(scope, OwnerScope):
        return {"user_id": scope.owner_id}
    if isinstance(scope, PublicScope):
        return {"is_public": True}
    if isinstance(scope, VisibleScope):
        if scope.viewer_id is None:
            return {"is_public": True}
        return {"$or": [{"user_id": scope.viewer_id}, {"is_public": True}]}
    raise ValueError(f"Unknown folder scope: {scope!r} - programming error")


def build_folder_query(query: FolderQuery) -> dict[str, Any]:
    """Build the MongoDB filter document for a folder listing.

    Args:
        query: Scope, parent restriction and optional name search

    Returns:
        MongoDB query document
    """
    mongo_query = build_scope_condition(query.scope)
    if not query.any_depth:
        mongo_query["parent_id"] = query.parent_id
    if query.search:
        mongo_query["name"] = build_contains_condition(query.search)
    return mongo_query
