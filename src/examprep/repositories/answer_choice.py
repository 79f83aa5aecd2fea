"""Repository for answer choice database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.models.answer_choice import AnswerChoice


class AnswerChoiceRepository:
    """Handle answer choice persistence operations."""

    @staticmethod
    async def get_by_id(session: AsyncSession, answer_id: int) -> AnswerChoice | None:
        """Retrieve an answer choice by its ID."""
        return await session.get(AnswerChoice, answer_id)

    @staticmethod
    async def get_by_question_id(
        session: AsyncSession,
        question_id: int,
    ) -> list[AnswerChoice]:
        """Retrieve the choices of a question ordered for display."""
        result = await session.execute(
            select(AnswerChoice)
            .where(AnswerChoice.question_id == question_id)
            .order_by(AnswerChoice.order, AnswerChoice.id)
        )
        return list(result.scalars().all())
