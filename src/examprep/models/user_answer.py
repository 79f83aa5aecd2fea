"""UserAnswer model for recording question attempts."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from examprep.models.base import Base


class UserAnswer(Base):
    """An immutable record of one user's attempt at one question.

    Attempts outlive the user, question and answer choice they point at,
    so the id columns carry no foreign keys. A deleted answer choice shows
    up as a history entry without a selected answer.
    """

    __tablename__ = "user_answers"
    __table_args__ = (
        CheckConstraint(
            "time_spent_ms >= 0", name="ck_user_answers_time_spent_non_negative"
        ),
        Index("idx_user_answers_user_question", "user_id", "question_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(index=True, nullable=False)
    question_id: Mapped[int] = mapped_column(index=True, nullable=False)
    selected_answer_id: Mapped[int] = mapped_column(nullable=False)
    is_correct: Mapped[bool] = mapped_column(nullable=False)
    time_spent_ms: Mapped[int | None] = mapped_column()
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
