from clarity.web.routers.ai import router as ai_router
from clarity.web.routers.auth import router as auth_router
from clarity.web.routers.files import router as files_router
from clarity.web.routers.folders import router as folders_router
from clarity.web.routers.notes import router as notes_router
from clarity.web.routers.profile import router as profile_router

__all__ = [
    "ai_router",
    "auth_router",
    "files_router",
    "folders_router",
    "notes_router",
    "profile_router",
]
