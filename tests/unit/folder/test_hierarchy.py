"""Tests for folder tree traversal."""

from uuid import UUID, uuid4

import pytest

from clarity.core.modules.folder.hierarchy import visible_tail, walk_to_root
from clarity.core.modules.folder.models import Folder
from clarity.errors import NotFoundError, ValidationError

OWNER_ID = UUID("11111111-1111-1111-1111-111111111111")


def make_loader(folders: list[Folder]):
    by_id = {folder.id: folder for folder in folders}

    async def load(folder_id: UUID) -> Folder:
        if folder_id not in by_id:
            raise NotFoundError(f"Folder not found: {folder_id}")
        return by_id[folder_id]

    return load


class TestWalkToRoot:
    """Tests for walk_to_root function."""

    async def test_root_folder_path_is_itself(self):
        root = Folder(name="Science", user_id=OWNER_ID)
        path = await walk_to_root(root.id, make_loader([root]))
        assert [folder.name for folder in path] == ["Science"]

    async def test_path_ordered_from_root(self):
        root = Folder(name="Science", user_id=OWNER_ID)
        middle = Folder(name="Biology", user_id=OWNER_ID, parent_id=root.id)
        leaf = Folder(name="Cells", user_id=OWNER_ID, parent_id=middle.id)
        path = await walk_to_root(leaf.id, make_loader([leaf, root, middle]))
        assert [folder.name for folder in path] == ["Science", "Biology", "Cells"]

    async def test_cycle_detected(self):
        first_id, second_id = uuid4(), uuid4()
        first = Folder(id=first_id, name="A", user_id=OWNER_ID, parent_id=second_id)
        second = Folder(id=second_id, name="B", user_id=OWNER_ID, parent_id=first_id)
        with pytest.raises(ValidationError, match="cycle"):
            await walk_to_root(first_id, make_loader([first, second]))

    async def test_missing_ancestor_propagates(self):
        orphan = Folder(name="Orphan", user_id=OWNER_ID, parent_id=uuid4())
        with pytest.raises(NotFoundError):
            await walk_to_root(orphan.id, make_loader([orphan]))


class TestVisibleTail:
    """Tests for visible_tail function."""

    def test_fully_visible_path_kept(self):
        root = Folder(name="Science", user_id=OWNER_ID)
        leaf = Folder(name="Cells", user_id=OWNER_ID, parent_id=root.id)
        assert visible_tail([root, leaf], OWNER_ID) == [root, leaf]

    def test_path_cut_below_hidden_ancestor(self):
        root = Folder(name="Open", user_id=OWNER_ID, is_public=True)
        hidden = Folder(name="Secret plans", user_id=OWNER_ID, parent_id=root.id)
        leaf = Folder(name="Shared", user_id=OWNER_ID, parent_id=hidden.id, is_public=True)
        assert visible_tail([root, hidden, leaf], None) == [leaf]
        assert visible_tail([root, hidden, leaf], uuid4()) == [leaf]

    def test_empty_path(self):
        assert visible_tail([], None) == []
