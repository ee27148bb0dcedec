from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from clarity.errors import UpstreamError, ValidationError
from clarity.web.deps import AppDep

router = APIRouter(tags=["ai"])


class AskRequest(BaseModel):
    """Question for the AI, optionally about a stored document."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"prompt": "Explain photosynthesis"}]},
    )

    prompt: str | None = Field(None, description="Question to answer")
    file_url: str | None = Field(None, alias="fileUrl", description="URL of a PDF to answer from")


class AskResponse(BaseModel):
    text: str = Field(..., description="Plain-English answer")


class AskErrorResponse(BaseModel):
    error: str = Field(..., description="Reason the question could not be answered")


@router.post(
    "/ai",
    summary="Ask AI",
    description=(
        "Answer a question in plain, jargon-free English, using the referenced PDF as context when `fileUrl` is given. "
        "Each request is independent and is attempted once."
    ),
    operation_id="askAI",
    response_model=AskResponse,
    responses={
        200: {"description": "Answer text"},
        400: {"model": AskErrorResponse, "description": "Neither prompt nor fileUrl given"},
        500: {"model": AskErrorResponse, "description": "AI backend failure"},
    },
)
async def ask_ai(request: AskRequest, app: AppDep) -> AskResponse | JSONResponse:
    try:
        text = await app.ask_ai(request.prompt, request.file_url)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except UpstreamError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})
    return AskResponse(text=text)
