"""Repository for question database operations."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.models.answer_choice import AnswerChoice
from examprep.models.category import Category
from examprep.models.question import Question, question_categories


class QuestionRepository:
    """Handle question persistence operations."""

    @staticmethod
    async def create(
        session: AsyncSession,
        categories: list[Category],
        answers: list[AnswerChoice],
        **fields: Any,
    ) -> Question:
        """Create a question together with its category links and choices."""
        question = Question(categories=categories, answers=answers, **fields)
        session.add(question)
        await session.flush()
        await session.refresh(question)
        return question

    @staticmethod
    async def get_by_id(session: AsyncSession, question_id: int) -> Question | None:
        """Retrieve a question by its ID."""
        return await session.get(Question, question_id)

    @staticmethod
    async def get_all(session: AsyncSession) -> list[Question]:
        """Retrieve all questions, including inactive drafts."""
        result = await session.execute(select(Question).order_by(Question.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_active(session: AsyncSession) -> list[Question]:
        """Retrieve all published questions."""
        result = await session.execute(
            select(Question)
            .where(Question.is_active.is_(True))
            .order_by(Question.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_active_by_category(
        session: AsyncSession,
        category_id: int,
    ) -> list[Question]:
        """Retrieve published questions linked to a category."""
        result = await session.execute(
            select(Question)
            .join(
                question_categories,
                question_categories.c.question_id == Question.id,
            )
            .where(
                question_categories.c.category_id == category_id,
                Question.is_active.is_(True),
            )
            .order_by(Question.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update(
        session: AsyncSession,
        question: Question,
        updates: dict[str, Any],
    ) -> Question:
        """Apply a partial update to a question."""
        for field, value in updates.items():
            setattr(question, field, value)
        await session.flush()
        await session.refresh(question)
        return question

    @staticmethod
    async def refresh(session: AsyncSession, question: Question) -> Question:
        """Flush pending changes and reload the question with its children."""
        await session.flush()
        await session.refresh(question)
        return question

    @staticmethod
    async def delete(session: AsyncSession, question: Question) -> None:
        """Delete a question; its choices and category links go with it."""
        await session.delete(question)
        await session.flush()
