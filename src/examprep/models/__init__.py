"""Database models package."""

from examprep.models.answer_choice import AnswerChoice
from examprep.models.base import Base
from examprep.models.category import Category
from examprep.models.question import Difficulty, Question, question_categories
from examprep.models.user import User
from examprep.models.user_answer import UserAnswer

__all__ = [
    "AnswerChoice",
    "Base",
    "Category",
    "Difficulty",
    "Question",
    "User",
    "UserAnswer",
    "question_categories",
]
