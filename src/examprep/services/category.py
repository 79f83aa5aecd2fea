"""Category service enforcing slug uniqueness and reference checks."""

from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.exceptions import ConflictError, NotFoundError, ReferentialIntegrityError
from examprep.models.category import Category
from examprep.repositories.category import CategoryRepository


class CategoryService:
    """Create, query, update and delete categories."""

    async def list_categories(self, session: AsyncSession) -> list[Category]:
        """Return all categories."""
        return await CategoryRepository.get_all(session)

    async def get_category(
        self,
        session: AsyncSession,
        category_id: int,
    ) -> Category | None:
        """Return a category, or None if it does not exist."""
        return await CategoryRepository.get_by_id(session, category_id)

    async def get_by_slug(self, session: AsyncSession, slug: str) -> Category:
        """Return the single category with the given slug.

        Raises:
            NotFoundError: If no category has the slug
            ConflictError: If several categories share it
        """
        matches = await CategoryRepository.find_by_slug(session, slug)
        if not matches:
            raise NotFoundError(resource="Category", resource_id=slug)
        if len(matches) > 1:
            raise ConflictError(
                f'Slug "{slug}" is ambiguous',
                field="slug",
                details={"match_count": len(matches)},
            )
        return matches[0]

    async def list_with_stats(
        self,
        session: AsyncSession,
    ) -> list[tuple[Category, int]]:
        """Return every category with its live count of active questions."""
        return await CategoryRepository.get_all_with_question_counts(session)

    async def create_category(
        self,
        session: AsyncSession,
        name: str,
        slug: str,
        description: str | None = None,
        color: str | None = None,
        icon_ref: str | None = None,
    ) -> Category:
        """Create a category with a slug no other category uses."""
        await self._ensure_slug_available(session, slug)

        category = await CategoryRepository.create(
            session,
            name=name,
            slug=slug,
            description=description,
            color=color,
            icon_ref=icon_ref,
        )
        logger.info("Category created", category_id=category.id, slug=slug)
        return category

    async def update_category(
        self,
        session: AsyncSession,
        category_id: int,
        updates: dict[str, Any],
    ) -> Category:
        """Patch a category, re-checking slug uniqueness when it changes."""
        category = await CategoryRepository.get_by_id(session, category_id)
        if category is None:
            raise NotFoundError(resource="Category", resource_id=category_id)

        if "slug" in updates:
            await self._ensure_slug_available(
                session, updates["slug"], exclude_id=category_id
            )

        category = await CategoryRepository.update(session, category, updates)
        logger.info(
            "Category updated",
            category_id=category_id,
            fields=sorted(updates),
        )
        return category

    async def remove_category(self, session: AsyncSession, category_id: int) -> None:
        """Delete a category no question refers to."""
        category = await CategoryRepository.get_by_id(session, category_id)
        if category is None:
            raise NotFoundError(resource="Category", resource_id=category_id)

        if await CategoryRepository.is_referenced(session, category_id):
            raise ReferentialIntegrityError(
                "Cannot delete category that is assigned to questions. "
                "Please reassign or delete those questions first.",
                details={"category_id": category_id},
            )

        await CategoryRepository.delete(session, category)
        logger.info("Category deleted", category_id=category_id)

    async def _ensure_slug_available(
        self,
        session: AsyncSession,
        slug: str,
        exclude_id: int | None = None,
    ) -> None:
        matches = await CategoryRepository.find_by_slug(session, slug)
        if any(category.id != exclude_id for category in matches):
            raise ConflictError(
                f'Category with slug "{slug}" already exists',
                field="slug",
            )
