"""Repository for category database operations."""

from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.models.category import Category
from examprep.models.question import Question, question_categories


class CategoryRepository:
    """Handle category persistence operations."""

    @staticmethod
    async def create(session: AsyncSession, **fields: Any) -> Category:
        """Create a new category record."""
        category = Category(**fields)
        session.add(category)
        await session.flush()
        await session.refresh(category)
        return category

    @staticmethod
    async def get_all(session: AsyncSession) -> list[Category]:
        """Retrieve all categories."""
        result = await session.execute(select(Category).order_by(Category.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(session: AsyncSession, category_id: int) -> Category | None:
        """Retrieve a category by its ID."""
        return await session.get(Category, category_id)

    @staticmethod
    async def find_by_slug(session: AsyncSession, slug: str) -> list[Category]:
        """Retrieve every category with the given slug (exact match)."""
        result = await session.execute(select(Category).where(Category.slug == slug))
        return list(result.scalars().all())

    @staticmethod
    async def get_all_with_question_counts(
        session: AsyncSession,
    ) -> list[tuple[Category, int]]:
        """Retrieve categories with the number of active questions in each."""
        result = await session.execute(
            select(Category, func.count(Question.id).label("question_count"))
            .outerjoin(
                question_categories,
                question_categories.c.category_id == Category.id,
            )
            .outerjoin(
                Question,
                and_(
                    Question.id == question_categories.c.question_id,
                    Question.is_active.is_(True),
                ),
            )
            .group_by(Category.id)
            .order_by(Category.id)
        )
        return [(row.Category, row.question_count) for row in result.all()]

    @staticmethod
    async def is_referenced(session: AsyncSession, category_id: int) -> bool:
        """Check whether any question (active or not) uses the category."""
        result = await session.execute(
            select(question_categories.c.question_id)
            .where(question_categories.c.category_id == category_id)
            .limit(1)
        )
        return result.first() is not None

    @staticmethod
    async def update(
        session: AsyncSession,
        category: Category,
        updates: dict[str, Any],
    ) -> Category:
        """Apply a partial update to a category."""
        for field, value in updates.items():
            setattr(category, field, value)
        await session.flush()
        await session.refresh(category)
        return category

    @staticmethod
    async def delete(session: AsyncSession, category: Category) -> None:
        """Delete a category record."""
        await session.delete(category)
        await session.flush()
