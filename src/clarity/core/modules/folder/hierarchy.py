"""Traversal helpers for the folder tree."""

from collections.abc import Awaitable, Callable
from uuid import UUID

from clarity.core.modules.folder.models import Folder
from clarity.errors import ValidationError


async def walk_to_root(folder_id: UUID, load: Callable[[UUID], Awaitable[Folder]]) -> list[Folder]:
    """Collect a folder and its ancestors, ordered from the root down.

    Args:
        folder_id: Folder to start from
        load: Loader returning a folder by id (raises NotFoundError when missing)

    Raises:
        ValidationError: If the stored parent links form a cycle
    """
    path: list[Folder] = []
    seen: set[UUID] = set()
    current: UUID | None = folder_id
    while current is not None:
        if current in seen:
            raise ValidationError(f"Folder hierarchy contains a cycle at '{current}'")
        seen.add(current)
        folder = await load(current)
        path.append(folder)
        current = folder.parent_id
    path.reverse()
    return path



def visible_tail(path: list[Folder], viewer_id: UUID | None) -> list[Folder]:
    """Trim a root-first path to the part below the deepest folder the viewer cannot read."""
    tail: list[Folder] = []
    for folder in reversed(path):
        if not folder.is_visible_to(viewer_id):
            break
        tail.append(folder)
    tail.reverse()
    return tail
