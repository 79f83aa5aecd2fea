"""API routers."""

from examprep.routers.attempts import router as attempts_router
from examprep.routers.categories import router as categories_router
from examprep.routers.files import router as files_router
from examprep.routers.questions import router as questions_router
from examprep.routers.users import router as users_router

__all__ = [
    "attempts_router",
    "categories_router",
    "files_router",
    "questions_router",
    "users_router",
]
