"""Service layer for business logic."""

from examprep.services.attempt import UserAnswerService
from examprep.services.category import CategoryService
from examprep.services.question import QuestionService
from examprep.services.storage import FileStorageService
from examprep.services.user import UserService

__all__ = [
    "CategoryService",
    "FileStorageService",
    "QuestionService",
    "UserAnswerService",
    "UserService",
]
