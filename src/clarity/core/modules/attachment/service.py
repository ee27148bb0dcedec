import asyncio
from datetime import timedelta
from uuid import UUID

import structlog

from clarity.core.core import Service
from clarity.core.modules.attachment.utils import PDF_MIME_TYPE, get_attachment_object_path, is_pdf
from clarity.core.modules.note.models import Note
from clarity.errors import AccessDeniedError, StorageError, ValidationError
from clarity.utils import now

logger = structlog.get_logger(__name__)

SIGNED_URL_TTL_SECONDS = 60 * 60
UPLOAD_CACHE_CONTROL = "3600"


class AttachmentService(Service):
    """Binds uploaded PDF files to notes with a URL matching folder visibility."""

    async def attach_file(self, note_id: UUID, uploader_id: UUID, filename: str, content: bytes, mime_type: str | None) -> Note:
        """Upload a file and store its URL on the note.

        Public folders get a permanent public URL, private folders a signed URL
        valid for SIGNED_URL_TTL_SECONDS that is not refreshed afterwards. The note
        is only written once the URL resolves; bytes already uploaded stay in
        storage if a later step fails.

        Args:
            note_id: Note to attach the file to
            uploader_id: Uploading user, must own the note
            filename: Original filename
            content: File bytes
            mime_type: Declared content type

        Returns:
            The note with its new file_url

        Raises:
            ValidationError: If the file is empty or not a PDF
            NotFoundError: If the note or its folder cannot be found
            AccessDeniedError: If the uploader does not own the note
            StorageError: If the upload or URL resolution fails
        """
        validate_pdf_upload(filename, content, mime_type)

        note = await self.core.services.note.fetch_note(note_id, uploader_id)
        if note.user_id != uploader_id:
            raise AccessDeniedError("Only the note owner can attach files")
        folder = await self.core.services.folder.get_folder(note.folder_id)

        uploaded_at = now()
        path = get_attachment_object_path(note.id, filename, uploaded_at, uploader_id, folder.is_public)
        storage = self.core.storage
        try:
            await asyncio.to_thread(storage.upload, path, content, PDF_MIME_TYPE, UPLOAD_CACHE_CONTROL, True)
        except OSError as e:
            logger.exception("attachment_upload_failed", note_id=note_id, path=path)
            raise StorageError("File upload failed") from e

        if folder.is_public:
            file_url = storage.get_public_url(path)
        else:
            file_url = storage.create_signed_url(path, SIGNED_URL_TTL_SECONDS)
            logger.info(
                "attachment_signed_url_created",
                note_id=note_id,
                expires_at=(uploaded_at + timedelta(seconds=SIGNED_URL_TTL_SECONDS)).isoformat(),
            )

        updated = await self.core.services.note.set_file_url(note.id, file_url)
        logger.debug("attached_file", note_id=note_id, path=path, size=len(content), public=folder.is_public)
        return updated

    async def upload_pdf_note(
        self, folder_id: UUID, owner_id: UUID, filename: str, content: bytes, mime_type: str | None, is_public: bool = False
    ) -> Note:
        """Create a note titled after the uploaded PDF and attach the file to it."""
        validate_pdf_upload(filename, content, mime_type)
        note = await self.core.services.note.create_note(folder_id, owner_id, filename, content="", is_public=is_public)
        return await self.attach_file(note.id, owner_id, filename, content, mime_type)


def validate_pdf_upload(filename: str, content: bytes, mime_type: str | None) -> None:
    if not content:
        raise ValidationError("Uploaded file is empty")
    if not is_pdf(filename, mime_type):
        raise ValidationError(f"Only PDF files can be attached (got {mime_type or 'unknown type'})")
