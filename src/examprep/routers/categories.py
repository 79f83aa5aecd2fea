"""Category endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.auth import require_admin
from examprep.db import get_db
from examprep.schemas import ErrorResponse
from examprep.schemas.category import (
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
    CategoryWithStatsResponse,
)
from examprep.services.category import CategoryService

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)


@router.get(
    "/",
    response_model=list[CategoryResponse],
    summary="List all categories",
)
async def list_categories(
    session: AsyncSession = Depends(get_db),
) -> list[CategoryResponse]:
    """List all categories."""
    categories = await CategoryService().list_categories(session)
    return [CategoryResponse.model_validate(category) for category in categories]


@router.get(
    "/stats",
    response_model=list[CategoryWithStatsResponse],
    summary="List categories with question counts",
    description="Each category with the number of active questions assigned to it.",
)
async def list_categories_with_stats(
    session: AsyncSession = Depends(get_db),
) -> list[CategoryWithStatsResponse]:
    """List categories annotated with active question counts."""
    rows = await CategoryService().list_with_stats(session)
    return [
        CategoryWithStatsResponse(
            **CategoryResponse.model_validate(category).model_dump(),
            question_count=question_count,
        )
        for category, question_count in rows
    ]


@router.get(
    "/slug/{slug}",
    response_model=CategoryResponse,
    summary="Get a category by slug",
)
async def get_category_by_slug(
    slug: str,
    session: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Return the category with the given slug."""
    category = await CategoryService().get_by_slug(session, slug)
    return CategoryResponse.model_validate(category)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse | None,
    summary="Get a category",
    description="Return the category, or null if it does not exist.",
)
async def get_category(
    category_id: int,
    session: AsyncSession = Depends(get_db),
) -> CategoryResponse | None:
    """Return a single category."""
    category = await CategoryService().get_category(session, category_id)
    if category is None:
        return None
    return CategoryResponse.model_validate(category)


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    dependencies=[Depends(require_admin)],
)
async def create_category(
    request: CategoryCreateRequest,
    session: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Create a category with a unique slug."""
    category = await CategoryService().create_category(
        session, **request.model_dump()
    )
    return CategoryResponse.model_validate(category)


@router.patch(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update a category",
    dependencies=[Depends(require_admin)],
)
async def update_category(
    category_id: int,
    request: CategoryUpdateRequest,
    session: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Apply a partial update to a category."""
    category = await CategoryService().update_category(
        session, category_id, request.model_dump(exclude_unset=True)
    )
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="Rejected while any question is still assigned to the category.",
    dependencies=[Depends(require_admin)],
)
async def delete_category(
    category_id: int,
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete an unreferenced category."""
    await CategoryService().remove_category(session, category_id)
