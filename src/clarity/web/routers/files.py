from fastapi import APIRouter
from fastapi.responses import FileResponse

from clarity.core.modules.storage.models import ObjectFileInfo
from clarity.web.deps import AppDep
from clarity.web.openapi import ErrorResponse

router = APIRouter(tags=["files"])


def _file_response(file_info: ObjectFileInfo) -> FileResponse:
    return FileResponse(
        path=file_info.file_path,
        media_type=file_info.content_type,
        filename=file_info.filename,
        content_disposition_type="inline",
        headers={"Cache-Control": f"max-age={file_info.cache_control}"},
    )


@router.get(
    "/files/public/{path:path}",
    summary="Download public file",
    description="Download a file stored in the public namespace.",
    operation_id="downloadPublicFile",
    response_class=FileResponse,
    responses={
        200: {"description": "File content"},
        404: {"model": ErrorResponse, "description": "File not found"},
    },
)
async def download_public_file(path: str, app: AppDep) -> FileResponse:
    return _file_response(app.get_public_file(path))


@router.get(
    "/files/signed/{token}",
    summary="Download file by signed URL",
    description="Download a file through a time-limited signed token. Expired or tampered tokens return 404.",
    operation_id="downloadSignedFile",
    response_class=FileResponse,
    responses={
        200: {"description": "File content"},
        404: {"model": ErrorResponse, "description": "File not found or link expired"},
    },
)
async def download_signed_file(token: str, app: AppDep) -> FileResponse:
    return _file_response(app.get_signed_file(token))
