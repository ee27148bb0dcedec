from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, UploadFile
from pydantic import BaseModel, Field

from clarity.core.modules.note.models import Note
from clarity.errors import ValidationError
from clarity.web.deps import AppDep, AuthTokenDep, OptionalAuthTokenDep
from clarity.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["notes"])


class CreateNoteRequest(BaseModel):
    """Request to create a new note. folder_id and title are required."""

    folder_id: UUID | None = Field(None, description="Folder to create the note in")
    title: str | None = Field(None, description="Note title")
    content: str | None = Field(None, description="Rich text (HTML) or plain text body")
    file_url: str | None = Field(None, description="URL of an already stored file")
    is_public: bool = Field(False, description="Whether anyone can read this note")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "folder_id": "0b6f4c1e-8a3a-4c55-9d5e-2f0e1f7b9a10",
                    "title": "Photosynthesis",
                    "content": "<p>Light reactions happen in the thylakoid.</p>",
                    "is_public": True,
                }
            ]
        }
    }


class UpdateNoteRequest(BaseModel):
    """Request to replace title and content of a note."""

    title: str = Field(..., description="New title")
    content: str | None = Field(None, description="New body")


@router.get(
    "/notes",
    summary="List folder notes",
    description=(
        "Get notes in a folder. The folder owner sees every note; other users see public notes and their own."
    ),
    operation_id="listNotes",
    responses={
        200: {"description": "Notes, newest first"},
        400: {"model": ErrorResponse, "description": "Missing folder_id"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Folder not found"},
    },
)
async def list_notes(
    app: AppDep,
    auth_token: AuthTokenDep,
    folder_id: Annotated[UUID | None, Query(description="Folder ID")] = None,
) -> list[Note]:
    if folder_id is None:
        raise ValidationError("Missing folder_id")
    return await app.get_notes_by_folder(auth_token, folder_id)


@router.post(
    "/notes",
    summary="Create note",
    description="Create a note in a folder owned by the authenticated user.",
    operation_id="createNote",
    status_code=201,
    responses={
        201: {"description": "Note created"},
        400: {"model": ErrorResponse, "description": "Missing required fields"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Folder belongs to another user"},
        404: {"model": ErrorResponse, "description": "Folder not found"},
    },
)
async def create_note(request: CreateNoteRequest, app: AppDep, auth_token: AuthTokenDep) -> Note:
    if request.folder_id is None or not request.title:
        raise ValidationError("Missing required fields")
    return await app.create_note(
        auth_token, request.folder_id, request.title, request.content, request.is_public, request.file_url
    )


@router.get(
    "/notes/{note_id}",
    summary="Get note",
    description="Get a note owned by the caller, in a folder owned by the caller, or marked public.",
    operation_id="getNote",
    responses={
        200: {"description": "Note details"},
        404: {"model": ErrorResponse, "description": "Note not found or access denied"},
    },
)
async def get_note(note_id: UUID, app: AppDep, auth_token: OptionalAuthTokenDep) -> Note:
    return await app.get_note(auth_token, note_id)


@router.patch(
    "/notes/{note_id}",
    summary="Update note",
    description="Replace title and content of a note owned by the authenticated user. Visibility is unchanged.",
    operation_id="updateNote",
    responses={
        200: {"description": "Note updated"},
        400: {"model": ErrorResponse, "description": "Empty title"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the note owner"},
        404: {"model": ErrorResponse, "description": "Note not found or access denied"},
    },
)
async def update_note(note_id: UUID, request: UpdateNoteRequest, app: AppDep, auth_token: AuthTokenDep) -> Note:
    return await app.update_note(auth_token, note_id, request.title, request.content)


@router.post(
    "/notes/{note_id}/attachment",
    summary="Attach PDF",
    description=(
        "Upload a PDF and store its URL on the note. Public folders get a permanent URL; "
        "private folders get a signed URL that expires after one hour and is not refreshed."
    ),
    operation_id="attachFile",
    responses={
        200: {"description": "Note with file_url"},
        400: {"model": ErrorResponse, "description": "Empty or non-PDF file"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the note owner"},
        404: {"model": ErrorResponse, "description": "Note not found or access denied"},
        502: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def attach_file(note_id: UUID, file: UploadFile, app: AppDep, auth_token: AuthTokenDep) -> Note:
    content = await file.read()
    filename = file.filename or "unnamed.pdf"
    return await app.attach_file(auth_token, note_id, filename, content, file.content_type)
