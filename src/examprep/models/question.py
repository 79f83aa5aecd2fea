"""Question model for multiple-choice exam items."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from examprep.models.base import Base

if TYPE_CHECKING:
    from examprep.models.answer_choice import AnswerChoice
    from examprep.models.category import Category


class Difficulty(StrEnum):
    """Difficulty level of a question."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


question_categories = Table(
    "question_categories",
    Base.metadata,
    Column(
        "question_id",
        ForeignKey("questions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        ForeignKey("categories.id"),
        primary_key=True,
        index=True,
    ),
)


class Question(Base):
    """Represents a single multiple-choice question."""

    __tablename__ = "questions"
    # attempts keep these ids after deletion, so they are never reused
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    image_ref: Mapped[str | None] = mapped_column(String(255))
    audio_ref: Mapped[str | None] = mapped_column(String(255))
    video_ref: Mapped[str | None] = mapped_column(String(255))
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty), nullable=False
    )
    explanation: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, index=True, nullable=False)
    order: Mapped[int | None] = mapped_column()
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    categories: Mapped[list[Category]] = relationship(
        "Category", secondary=question_categories, lazy="selectin"
    )
    answers: Mapped[list[AnswerChoice]] = relationship(
        "AnswerChoice",
        back_populates="question",
        order_by="AnswerChoice.order",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def category_ids(self) -> list[int]:
        """Ids of the categories this question belongs to."""
        return [category.id for category in self.categories]
