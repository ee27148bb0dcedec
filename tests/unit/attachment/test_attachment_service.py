"""Tests for AttachmentService: upload, URL binding and PDF notes."""

from datetime import timedelta
from uuid import uuid4

import pytest
from itsdangerous import URLSafeTimedSerializer

from clarity.core.modules.storage import storage as storage_module
from clarity.core.modules.storage.storage import SIGNED_URL_SALT
from clarity.errors import AccessDeniedError, NotFoundError, StorageError, ValidationError

PDF_BYTES = b"%PDF-1.4 lecture slides"


def token_from(url: str) -> str:
    return url.rsplit("/", 1)[1]


class TestAttachFile:
    """Tests for AttachmentService.attach_file."""

    async def test_public_folder_gets_public_url(self, services, core, alice_id):
        folder = await services.folder.create_folder("Open", alice_id, is_public=True)
        note = await services.note.create_note(folder.id, alice_id, "Slides", is_public=True)

        updated = await services.attachment.attach_file(note.id, alice_id, "slides.pdf", PDF_BYTES, "application/pdf")

        assert updated.file_url.startswith(f"http://testserver/api/files/public/public/{note.id}-")
        assert updated.file_url.endswith("-slides.pdf")
        path = updated.file_url.removeprefix("http://testserver/api/files/public/")
        assert core.storage.open_public(path).file_path.read_bytes() == PDF_BYTES
        assert (await services.note.get_note(note.id)).file_url == updated.file_url

    async def test_private_folder_gets_signed_url(self, services, core, alice_id):
        folder = await services.folder.create_folder("Private", alice_id)
        note = await services.note.create_note(folder.id, alice_id, "Slides")

        updated = await services.attachment.attach_file(note.id, alice_id, "slides.pdf", PDF_BYTES, "application/pdf")

        assert updated.file_url.startswith("http://testserver/api/files/signed/")
        info = core.storage.open_signed(token_from(updated.file_url))
        assert info.file_path.read_bytes() == PDF_BYTES
        assert info.file_path.parent.name == str(alice_id)
        assert info.cache_control == "3600"

    async def test_signed_url_valid_for_one_hour(self, services, core, config, alice_id, monkeypatch):
        folder = await services.folder.create_folder("Private", alice_id)
        note = await services.note.create_note(folder.id, alice_id, "Report")
        updated = await services.attachment.attach_file(note.id, alice_id, "report.pdf", PDF_BYTES, "application/pdf")
        token = token_from(updated.file_url)

        serializer = URLSafeTimedSerializer(config.storage_secret_key, salt=SIGNED_URL_SALT)
        payload, signed_at = serializer.loads(token, return_timestamp=True)
        assert payload["ttl"] == 3600

        monkeypatch.setattr(storage_module, "now", lambda: signed_at + timedelta(seconds=3599))
        assert core.storage.open_signed(token).file_path.read_bytes() == PDF_BYTES

        monkeypatch.setattr(storage_module, "now", lambda: signed_at + timedelta(seconds=3601))
        with pytest.raises(NotFoundError):
            core.storage.open_signed(token)

    async def test_reattach_replaces_url(self, services, alice_id):
        folder = await services.folder.create_folder("Open", alice_id, is_public=True)
        note = await services.note.create_note(folder.id, alice_id, "Slides")
        first = await services.attachment.attach_file(note.id, alice_id, "v1.pdf", PDF_BYTES, "application/pdf")
        second = await services.attachment.attach_file(note.id, alice_id, "v2.pdf", PDF_BYTES, "application/pdf")
        assert first.file_url != second.file_url
        assert second.file_url.endswith("-v2.pdf")

    async def test_non_pdf_rejected(self, services, alice_id):
        folder = await services.folder.create_folder("Open", alice_id, is_public=True)
        note = await services.note.create_note(folder.id, alice_id, "Photo")
        with pytest.raises(ValidationError):
            await services.attachment.attach_file(note.id, alice_id, "photo.jpg", b"\xff\xd8", "image/jpeg")
        assert (await services.note.get_note(note.id)).file_url is None

    async def test_empty_file_rejected(self, services, alice_id):
        folder = await services.folder.create_folder("Open", alice_id, is_public=True)
        note = await services.note.create_note(folder.id, alice_id, "Slides")
        with pytest.raises(ValidationError):
            await services.attachment.attach_file(note.id, alice_id, "slides.pdf", b"", "application/pdf")

    async def test_unknown_note(self, services, alice_id):
        with pytest.raises(NotFoundError):
            await services.attachment.attach_file(uuid4(), alice_id, "slides.pdf", PDF_BYTES, "application/pdf")

    async def test_only_owner_attaches(self, services, alice_id, bob_id):
        folder = await services.folder.create_folder("Open", alice_id, is_public=True)
        note = await services.note.create_note(folder.id, alice_id, "Slides", is_public=True)
        with pytest.raises(AccessDeniedError):
            await services.attachment.attach_file(note.id, bob_id, "slides.pdf", PDF_BYTES, "application/pdf")

    async def test_storage_failure_leaves_note_unchanged(self, services, core, alice_id, monkeypatch):
        folder = await services.folder.create_folder("Private", alice_id)
        note = await services.note.create_note(folder.id, alice_id, "Slides")

        def failing_upload(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(core.storage, "upload", failing_upload)
        with pytest.raises(StorageError):
            await services.attachment.attach_file(note.id, alice_id, "slides.pdf", PDF_BYTES, "application/pdf")
        assert (await services.note.get_note(note.id)).file_url is None


class TestUploadPdfNote:
    """Tests for AttachmentService.upload_pdf_note."""

    async def test_creates_note_named_after_file(self, services, alice_id):
        folder = await services.folder.create_folder("Private", alice_id)
        note = await services.attachment.upload_pdf_note(
            folder.id, alice_id, "Week 1.pdf", PDF_BYTES, "application/pdf", is_public=True
        )
        assert note.title == "Week 1.pdf"
        assert note.content == ""
        assert note.is_public is True
        assert note.file_url.startswith("http://testserver/api/files/signed/")
        assert [n.id for n in await services.note.list_notes(folder.id, alice_id)] == [note.id]

    async def test_invalid_file_creates_nothing(self, services, alice_id):
        folder = await services.folder.create_folder("Private", alice_id)
        with pytest.raises(ValidationError):
            await services.attachment.upload_pdf_note(folder.id, alice_id, "notes.txt", b"text", "text/plain")
        assert await services.note.list_notes(folder.id, alice_id) == []
