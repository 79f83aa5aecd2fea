"""Answer choice model for the options of a question."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from examprep.models.base import Base

if TYPE_CHECKING:
    from examprep.models.question import Question


class AnswerChoice(Base):
    """One selectable option belonging to a question."""

    __tablename__ = "answer_choices"
    # attempts keep these ids after deletion, so they are never reused
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), index=True, nullable=False
    )
    choice_text: Mapped[str] = mapped_column(Text, nullable=False)
    choice_letter: Mapped[str] = mapped_column(String(8), nullable=False)
    is_correct: Mapped[bool] = mapped_column(default=False, nullable=False)
    image_ref: Mapped[str | None] = mapped_column(String(255))
    order: Mapped[int] = mapped_column(nullable=False)

    # Relationships
    question: Mapped[Question] = relationship("Question", back_populates="answers")
