"""Object storage with public and time-limited signed URLs."""

from datetime import timedelta
from pathlib import Path, PurePosixPath
from typing import Protocol
from urllib.parse import quote

import structlog
from itsdangerous import BadSignature, URLSafeTimedSerializer

from clarity.core.modules.storage.models import ObjectFileInfo, StoredObject
from clarity.errors import NotFoundError, StorageError
from clarity.utils import now

logger = structlog.get_logger(__name__)

PUBLIC_NAMESPACE = "public"
SIGNED_URL_SALT = "clarity-signed-url"
META_SUFFIX = ".meta.json"


class ObjectStorage(Protocol):
    """Storage contract used by the attachment flow and file downloads."""

    def upload(
        self, path: str, content: bytes, content_type: str, cache_control: str = "3600", upsert: bool = False
    ) -> StoredObject: ...

    def get_public_url(self, path: str) -> str: ...

    def create_signed_url(self, path: str, ttl_seconds: int) -> str: ...

    def open_public(self, path: str) -> ObjectFileInfo: ...

    def open_signed(self, token: str) -> ObjectFileInfo: ...


class LocalObjectStorage:
    """Filesystem-backed object storage served through this API's /files routes.

    Objects under ``public/`` are readable by URL without a token. Everything else
    is only reachable through a signed URL carrying the object path and its
    validity window.
    """

    def __init__(self, root: str, public_base_url: str, secret_key: str) -> None:
        self.root = Path(root).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        self._serializer = URLSafeTimedSerializer(secret_key, salt=SIGNED_URL_SALT)

    def upload(
        self, path: str, content: bytes, content_type: str, cache_control: str = "3600", upsert: bool = False
    ) -> StoredObject:
        """Write object bytes and metadata.

        Raises:
            StorageError: If the path is invalid or exists and upsert is False
        """
        file_path = self._resolve(path)
        if file_path.exists() and not upsert:
            raise StorageError(f"Object already exists: {path}")

        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
        stored = StoredObject(path=path, size=len(content), content_type=content_type, cache_control=cache_control)
        self._meta_path(file_path).write_text(stored.model_dump_json())
        logger.debug("object_uploaded", path=path, size=stored.size)
        return stored

    def get_public_url(self, path: str) -> str:
        """Permanent URL for an object in the public namespace."""
        if not is_public_path(path):
            raise StorageError(f"Object is not in the public namespace: {path}")
        return f"{self.public_base_url}/api/files/public/{quote(path)}"

    def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        """URL granting read access to an object for ttl_seconds."""
        if ttl_seconds <= 0:
            raise StorageError("Signed URL lifetime must be positive")
        if not self._resolve(path).exists():
            raise StorageError(f"Object not found: {path}")
        token = self._serializer.dumps({"path": path, "ttl": ttl_seconds})
        return f"{self.public_base_url}/api/files/signed/{token}"

    def open_public(self, path: str) -> ObjectFileInfo:
        if not is_public_path(path):
            raise NotFoundError("File not found")
        return self._file_info(path)

    def open_signed(self, token: str) -> ObjectFileInfo:
        """Resolve a signed token; tampered and expired tokens look like missing files."""
        try:
            payload, signed_at = self._serializer.loads(token, return_timestamp=True)
        except BadSignature as e:
            raise NotFoundError("File not found") from e

        if now() - signed_at > timedelta(seconds=payload["ttl"]):
            raise NotFoundError("File not found")
        return self._file_info(payload["path"])

    def _file_info(self, path: str) -> ObjectFileInfo:
        try:
            file_path = self._resolve(path)
        except StorageError as e:
            raise NotFoundError("File not found") from e
        meta_path = self._meta_path(file_path)
        if not file_path.is_file() or not meta_path.is_file():
            raise NotFoundError("File not found")

        stored = StoredObject.model_validate_json(meta_path.read_text())
        return ObjectFileInfo(
            file_path=file_path,
            filename=PurePosixPath(path).name,
            content_type=stored.content_type,
            cache_control=stored.cache_control,
        )

    def _resolve(self, path: str) -> Path:
        """Absolute location of an object; rejects paths escaping the root."""
        if not path or path.endswith(META_SUFFIX):
            raise StorageError(f"Invalid object path: {path!r}")
        file_path = (self.root / path).resolve()
        if self.root not in file_path.parents:
            raise StorageError(f"Invalid object path: {path!r}")
        return file_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_name(file_path.name + META_SUFFIX)


def is_public_path(path: str) -> bool:
    parts = PurePosixPath(path).parts
    return len(parts) > 1 and parts[0] == PUBLIC_NAMESPACE
