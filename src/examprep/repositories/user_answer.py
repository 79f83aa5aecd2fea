"""Repository for user answer database operations."""

from dataclasses import dataclass

from sqlalchemy import Integer, case, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.models.answer_choice import AnswerChoice
from examprep.models.user_answer import UserAnswer


@dataclass(frozen=True)
class AttemptAggregate:
    """Raw attempt counters computed by the database."""

    total_attempts: int
    correct_attempts: int
    average_time_ms: float | None
    unique_questions: int


class UserAnswerRepository:
    """Handle user answer persistence operations."""

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: int,
        question_id: int,
        selected_answer_id: int,
        is_correct: bool,
        time_spent_ms: int | None = None,
    ) -> UserAnswer:
        """Append a new attempt record."""
        user_answer = UserAnswer(
            user_id=user_id,
            question_id=question_id,
            selected_answer_id=selected_answer_id,
            is_correct=is_correct,
            time_spent_ms=time_spent_ms,
        )
        session.add(user_answer)
        await session.flush()
        await session.refresh(user_answer)
        return user_answer

    @staticmethod
    async def get_history_with_choices(
        session: AsyncSession,
        user_id: int,
        question_id: int,
    ) -> list[tuple[UserAnswer, AnswerChoice | None]]:
        """Retrieve a user's attempts at a question, most recent first."""
        result = await session.execute(
            select(UserAnswer, AnswerChoice)
            .outerjoin(AnswerChoice, AnswerChoice.id == UserAnswer.selected_answer_id)
            .where(
                UserAnswer.user_id == user_id,
                UserAnswer.question_id == question_id,
            )
            .order_by(UserAnswer.created_at.desc(), UserAnswer.id.desc())
        )
        return [(row.UserAnswer, row.AnswerChoice) for row in result.all()]

    @staticmethod
    async def get_latest(
        session: AsyncSession,
        user_id: int,
        question_id: int,
    ) -> UserAnswer | None:
        """Retrieve a user's most recent attempt at a question."""
        result = await session.execute(
            select(UserAnswer)
            .where(
                UserAnswer.user_id == user_id,
                UserAnswer.question_id == question_id,
            )
            .order_by(UserAnswer.created_at.desc(), UserAnswer.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def aggregate_for_question(
        session: AsyncSession,
        question_id: int,
    ) -> AttemptAggregate:
        """Aggregate every user's attempts at a question."""
        return await UserAnswerRepository._aggregate(
            session, UserAnswer.question_id == question_id
        )

    @staticmethod
    async def aggregate_for_user(
        session: AsyncSession,
        user_id: int,
    ) -> AttemptAggregate:
        """Aggregate a user's attempts across all questions."""
        return await UserAnswerRepository._aggregate(
            session, UserAnswer.user_id == user_id
        )

    @staticmethod
    async def _aggregate(session: AsyncSession, condition) -> AttemptAggregate:
        result = await session.execute(
            select(
                func.count(UserAnswer.id).label("total"),
                func.coalesce(
                    func.sum(case((UserAnswer.is_correct.is_(True), 1), else_=0)),
                    0,
                ).cast(Integer).label("correct"),
                # AVG skips rows without a recorded time
                func.avg(UserAnswer.time_spent_ms).label("average_time_ms"),
                func.count(distinct(UserAnswer.question_id)).label("unique_questions"),
            ).where(condition)
        )
        row = result.one()
        return AttemptAggregate(
            total_attempts=row.total,
            correct_attempts=row.correct,
            average_time_ms=(
                float(row.average_time_ms) if row.average_time_ms is not None else None
            ),
            unique_questions=row.unique_questions,
        )
