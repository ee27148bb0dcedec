"""Utility functions for attachment handling."""

import re
from datetime import datetime
from pathlib import Path
from uuid import UUID

from clarity.core.modules.storage.storage import PUBLIC_NAMESPACE
from clarity.utils import timestamp_ms

PDF_MIME_TYPE = "application/pdf"


def get_attachment_object_path(
    note_id: UUID,
    filename: str,
    uploaded_at: datetime,
    owner_id: UUID,
    is_public: bool,
) -> str:
    """Calculate the storage path for a note attachment.

    Public folders share the ``public/`` namespace; private folders are
    namespaced by owner. Note id and upload time keep paths from colliding.

    Args:
        note_id: Note the file is attached to
        filename: Original filename (will be sanitized)
        uploaded_at: Upload timestamp
        owner_id: Uploading owner
        is_public: Visibility of the containing folder

    Returns:
        Object path relative to the storage root
    """
    namespace = PUBLIC_NAMESPACE if is_public else str(owner_id)
    return f"{namespace}/{note_id}-{timestamp_ms(uploaded_at)}-{sanitize_filename(filename)}"


def is_pdf(filename: str, mime_type: str | None) -> bool:
    if mime_type == PDF_MIME_TYPE:
        return True
    return Path(filename).suffix.lower() == ".pdf"


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe use as the last segment of an object path.

    Removes dangerous characters, prevents path traversal, and handles edge cases
    while preserving readability and file extensions.

    Args:
        filename: Original filename from user

    Returns:
        Sanitized filename
    """
    # Remove path components to prevent traversal attacks
    filename = Path(filename).name

    # Remove leading dots to prevent hidden files
    filename = filename.lstrip(".")

    # Allow only word characters, spaces, dots, and hyphens
    sanitized = re.sub(r"[^\w\s.-]", "_", filename)
    sanitized = re.sub(r"_+", "_", sanitized)
    sanitized = re.sub(r"\s+", " ", sanitized)

    # Limit length to 100 characters while preserving extension
    if len(sanitized) > 100:
        parts = sanitized.rsplit(".", 1)
        if len(parts) == 2:
            name, ext = parts
            max_name_len = 96 - len(ext)
            sanitized = f"{name[:max_name_len]}.{ext}" if max_name_len > 0 else f"file.{ext}"
        else:
            sanitized = sanitized[:100]

    # Result must contain something besides whitespace, underscores, dots and hyphens
    if not sanitized or not re.sub(r"[\s._-]", "", sanitized):
        sanitized = "unnamed_file"

    return sanitized
