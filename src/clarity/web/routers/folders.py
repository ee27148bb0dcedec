from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Form, Query, UploadFile
from pydantic import BaseModel, Field

from clarity.core.modules.folder.models import Folder, FolderView
from clarity.core.modules.note.models import Note
from clarity.web.deps import AppDep, AuthTokenDep, OptionalAuthTokenDep
from clarity.web.openapi import ErrorResponse

router = APIRouter(tags=["folders"])


class CreateFolderRequest(BaseModel):
    """Request to create a new folder."""

    name: str = Field(..., description="Folder name")
    parent_id: UUID | None = Field(None, description="Parent folder ID, omit for a root-level folder")
    is_public: bool = Field(False, description="Whether anyone can read this folder")

    model_config = {"json_schema_extra": {"examples": [{"name": "Biology", "parent_id": None, "is_public": True}]}}


@router.get(
    "/folders",
    summary="List my folders",
    description=(
        "Without `q`, get the root-level folders of the authenticated user. "
        "With `q`, search all of the user's folders at any depth by case-insensitive name substring."
    ),
    operation_id="listMyFolders",
    responses={
        200: {"description": "Folders, newest first"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_my_folders(
    app: AppDep,
    auth_token: AuthTokenDep,
    q: Annotated[str | None, Query(description="Name search term")] = None,
) -> list[Folder]:
    return await app.get_my_folders(auth_token, q)


@router.get(
    "/folders/public",
    summary="List public folders",
    description="Get every public folder at any depth, optionally filtered by case-insensitive name substring.",
    operation_id="listPublicFolders",
    responses={200: {"description": "Public folders, newest first"}},
)
async def list_public_folders(
    app: AppDep,
    q: Annotated[str | None, Query(description="Name search term")] = None,
) -> list[Folder]:
    return await app.get_public_folders(q)


@router.post(
    "/folders",
    summary="Create folder",
    description="Create a folder at root level or inside a folder owned by the authenticated user.",
    operation_id="createFolder",
    status_code=201,
    responses={
        201: {"description": "Folder created"},
        400: {"model": ErrorResponse, "description": "Empty folder name"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Parent folder belongs to another user"},
        404: {"model": ErrorResponse, "description": "Parent folder not found"},
    },
)
async def create_folder(request: CreateFolderRequest, app: AppDep, auth_token: AuthTokenDep) -> Folder:
    return await app.create_folder(auth_token, request.name, request.parent_id, request.is_public)


@router.get(
    "/folders/{folder_id}",
    summary="Get folder view",
    description=(
        "Get a folder with its breadcrumb path, the subfolders and the notes the caller can read. "
        "Anonymous callers can open public folders."
    ),
    operation_id="getFolder",
    responses={
        200: {"description": "Folder view"},
        404: {"model": ErrorResponse, "description": "Folder not found or access denied"},
    },
)
async def get_folder(folder_id: UUID, app: AppDep, auth_token: OptionalAuthTokenDep) -> FolderView:
    return await app.get_folder_view(auth_token, folder_id)


@router.get(
    "/folders/{folder_id}/children",
    summary="List subfolders",
    description="Get subfolders the caller can read: their own and public ones.",
    operation_id="listChildFolders",
    responses={
        200: {"description": "Subfolders, newest first"},
        404: {"model": ErrorResponse, "description": "Folder not found or access denied"},
    },
)
async def list_child_folders(folder_id: UUID, app: AppDep, auth_token: OptionalAuthTokenDep) -> list[Folder]:
    return await app.get_child_folders(auth_token, folder_id)


@router.post(
    "/folders/{folder_id}/pdfs",
    summary="Upload PDF as note",
    description=(
        "Create a note titled after the uploaded PDF and attach the file. "
        "Files in private folders get a signed URL that expires after one hour."
    ),
    operation_id="uploadPdfNote",
    status_code=201,
    responses={
        201: {"description": "Note created with attachment"},
        400: {"model": ErrorResponse, "description": "Empty or non-PDF file"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Folder belongs to another user"},
        404: {"model": ErrorResponse, "description": "Folder not found"},
        502: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def upload_pdf_note(
    folder_id: UUID,
    file: UploadFile,
    app: AppDep,
    auth_token: AuthTokenDep,
    is_public: Annotated[bool, Form(description="Whether the new note is public")] = False,
) -> Note:
    content = await file.read()
    filename = file.filename or "unnamed.pdf"
    return await app.upload_pdf_note(auth_token, folder_id, filename, content, file.content_type, is_public)
