from pathlib import Path

from pydantic import BaseModel, Field


class StoredObject(BaseModel):
    """Metadata kept next to each stored object."""

    path: str = Field(..., description="Object path relative to the storage root")
    size: int = Field(..., description="Size in bytes")
    content_type: str = Field(..., description="MIME type")
    cache_control: str = Field(..., description="Cache-Control max-age in seconds, sent on download")


class ObjectFileInfo(BaseModel):
    """Information about a stored object for download."""

    file_path: Path = Field(..., description="Absolute path to file on disk")
    filename: str = Field(..., description="Download filename")
    content_type: str = Field(..., description="MIME type")
    cache_control: str = Field(..., description="Cache-Control max-age in seconds")
