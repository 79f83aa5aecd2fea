"""Repository layer for database operations."""

from examprep.repositories.answer_choice import AnswerChoiceRepository
from examprep.repositories.category import CategoryRepository
from examprep.repositories.question import QuestionRepository
from examprep.repositories.user import UserRepository
from examprep.repositories.user_answer import UserAnswerRepository

__all__ = [
    "AnswerChoiceRepository",
    "CategoryRepository",
    "QuestionRepository",
    "UserAnswerRepository",
    "UserRepository",
]
