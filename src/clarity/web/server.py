from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clarity.app import App
from clarity.config import Config
from clarity.errors import UserError
from clarity.web.error_handlers import general_exception_handler, user_error_handler
from clarity.web.openapi import set_custom_openapi
from clarity.web.routers import (
    ai_router,
    auth_router,
    files_router,
    folders_router,
    notes_router,
    profile_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Clarity API",
        lifespan=lifespan,
        openapi_tags=[],
    )
    # Available before startup so tests and tools can use the app without running the lifespan
    app.state.app = app_instance
    app.state.config = config

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")
    app.include_router(folders_router, prefix="/api")
    app.include_router(notes_router, prefix="/api")
    app.include_router(files_router, prefix="/api")
    app.include_router(ai_router, prefix="/api")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
