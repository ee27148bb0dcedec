"""Shared pytest fixtures."""

import copy
import re
from collections.abc import Iterator
from types import SimpleNamespace
from typing import Any
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from clarity.app import App
from clarity.config import Config
from clarity.core.core import Core
from clarity.web.server import create_fastapi_app

ALICE_ID = UUID("11111111-1111-1111-1111-111111111111")
BOB_ID = UUID("22222222-2222-2222-2222-222222222222")


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    """Evaluate the subset of MongoDB query syntax the services use."""
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in condition):
                return False
            continue
        value = doc.get(key)
        if isinstance(condition, dict) and any(op.startswith("$") for op in condition):
            if "$regex" in condition:
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(value, str) or re.search(condition["$regex"], value, flags) is None:
                    return False
            if "$eq" in condition and value != condition["$eq"]:
                return False
            if "$ne" in condition and value == condition["$ne"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key_or_list: Any, direction: int = 1) -> "FakeCursor":
        sort_keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        for field, field_direction in reversed(sort_keys):
            self._docs.sort(key=lambda doc, f=field: doc.get(f), reverse=field_direction < 0)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return list(self._docs[:length] if length else self._docs)

    def __aiter__(self) -> "FakeCursor":
        self._iter = iter(self._docs)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeCollection:
    """In-memory stand-in for pymongo's AsyncCollection."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "index"

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        if any(existing["_id"] == doc["_id"] for existing in self.docs):
            raise ValueError(f"Duplicate _id {doc['_id']}")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query or {})])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for doc in self.docs if _matches(doc, query))


class FakeDatabase:
    def __init__(self) -> None:
        self._collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self._collections.setdefault(name, FakeCollection())


@pytest.fixture
def config(tmp_path):
    """Configuration pointing storage at a temporary directory."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/clarity_test",
        host="127.0.0.1",
        port=8000,
        debug=True,
        public_base_url="http://testserver",
        storage_path=str(tmp_path / "storage"),
        storage_secret_key="test-storage-secret",
        llm_model="gemini/gemini-2.5-flash",
        llm_api_key="test-llm-key",
    )


@pytest.fixture
def core(config):
    """Core wired to an in-memory database and local storage."""
    return Core(config, database=FakeDatabase())


@pytest.fixture
def services(core):
    return core.services


@pytest.fixture
def client(config, core) -> Iterator[TestClient]:
    """HTTP client for the FastAPI app backed by the in-memory core."""
    fastapi_app = create_fastapi_app(App(config, core), config)
    with TestClient(fastapi_app) as test_client:
        yield test_client


@pytest.fixture
def alice_id():
    return ALICE_ID


@pytest.fixture
def bob_id():
    return BOB_ID
