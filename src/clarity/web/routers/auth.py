from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from clarity.core.modules.session.service import SESSION_TTL_SECONDS
from clarity.core.modules.user.models import UserView
from clarity.web.deps import AUTH_COOKIE_NAME, AppDep, AuthTokenDep
from clarity.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class SignUpRequest(BaseModel):
    """Registration request."""

    email: str = Field(..., description="Email address, used to log in")
    password: str = Field(..., description="Password (at least 6 characters, no whitespace)")
    display_name: str | None = Field(None, description="Optional display name")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class LoginResponse(BaseModel):
    """Authentication response."""

    token: str = Field(..., description="Authentication token for subsequent requests")


@router.post(
    "/auth/signup",
    summary="Register user",
    description="Create an account with email and password.",
    operation_id="signUp",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid email, weak password, or email already registered"},
    },
)
async def sign_up(request: SignUpRequest, app: AppDep) -> UserView:
    return await app.sign_up(request.email, request.password, request.display_name)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive an authentication token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> LoginResponse:
    """Authenticate user and create session."""
    token = await app.login(login_data.email, login_data.password)

    # Set cookie for browser-based clients
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
        max_age=SESSION_TTL_SECONDS,
    )

    return LoginResponse(token=token)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current authentication session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie(AUTH_COOKIE_NAME)
