from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from clarity.config import Config
from clarity.core.modules.storage.storage import LocalObjectStorage, ObjectStorage


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from clarity.core.modules.access.service import AccessService  # noqa: PLC0415
    from clarity.core.modules.ai.service import AIService  # noqa: PLC0415
    from clarity.core.modules.attachment.service import AttachmentService  # noqa: PLC0415
    from clarity.core.modules.folder.service import FolderService  # noqa: PLC0415
    from clarity.core.modules.note.service import NoteService  # noqa: PLC0415
    from clarity.core.modules.session.service import SessionService  # noqa: PLC0415
    from clarity.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    session: SessionService
    access: AccessService
    folder: FolderService
    note: NoteService
    attachment: AttachmentService
    ai: AIService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - user must be first
        service_configs = [
            ("user", "clarity.core.modules.user.service", "UserService"),
            ("session", "clarity.core.modules.session.service", "SessionService"),
            ("access", "clarity.core.modules.access.service", "AccessService"),
            ("folder", "clarity.core.modules.folder.service", "FolderService"),
            ("note", "clarity.core.modules.note.service", "NoteService"),
            ("attachment", "clarity.core.modules.attachment.service", "AttachmentService"),
            ("ai", "clarity.core.modules.ai.service", "AIService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database, object storage, and all service instances.

    The database handle and storage may be injected; when omitted, a MongoDB client
    is created from ``config.database_url`` and a local storage rooted at
    ``config.storage_path`` is used.
    """

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    database: AsyncDatabase[dict[str, Any]]
    storage: ObjectStorage
    services: Services

    def __init__(
        self,
        config: Config,
        database: AsyncDatabase[dict[str, Any]] | None = None,
        storage: ObjectStorage | None = None,
    ) -> None:
        self.config = config
        self.mongo_client = None
        if database is None:
            self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard")
            database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.database = database
        self.storage = storage or LocalObjectStorage(
            root=config.storage_path,
            public_base_url=config.public_base_url,
            secret_key=config.storage_secret_key,
        )
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the MongoDB connection if this core owns it."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
