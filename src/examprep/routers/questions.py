"""Question and answer choice endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.auth import require_admin
from examprep.db import get_db
from examprep.schemas import ErrorResponse
from examprep.schemas.question import (
    AnswersReplaceRequest,
    QuestionCreateRequest,
    QuestionResponse,
    QuestionUpdateRequest,
    QuestionWithAnswersResponse,
)
from examprep.services.question import QuestionService

router = APIRouter(
    prefix="/questions",
    tags=["Questions"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get(
    "/",
    response_model=list[QuestionResponse],
    summary="List active questions",
)
async def list_active_questions(
    session: AsyncSession = Depends(get_db),
) -> list[QuestionResponse]:
    """List all published questions."""
    questions = await QuestionService().list_active(session)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get(
    "/all",
    response_model=list[QuestionResponse],
    summary="List all questions",
    description="Includes inactive drafts. Admin only.",
    dependencies=[Depends(require_admin)],
)
async def list_all_questions(
    session: AsyncSession = Depends(get_db),
) -> list[QuestionResponse]:
    """List every question."""
    questions = await QuestionService().list_all(session)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get(
    "/by-category/{category_id}",
    response_model=list[QuestionResponse],
    summary="List active questions in a category",
)
async def list_questions_by_category(
    category_id: int,
    session: AsyncSession = Depends(get_db),
) -> list[QuestionResponse]:
    """List published questions assigned to a category."""
    questions = await QuestionService().list_by_category(session, category_id)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get(
    "/{question_id}",
    response_model=QuestionWithAnswersResponse | None,
    summary="Get a question with its answer choices",
    description="Return the question, or null if it does not exist.",
)
async def get_question(
    question_id: int,
    session: AsyncSession = Depends(get_db),
) -> QuestionWithAnswersResponse | None:
    """Return a question with answer choices sorted by display order."""
    question = await QuestionService().get_with_answers(session, question_id)
    if question is None:
        return None
    return QuestionWithAnswersResponse.model_validate(question)


@router.post(
    "/",
    response_model=QuestionWithAnswersResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a question with answer choices",
    description="Exactly one answer must be correct and every category must exist.",
    dependencies=[Depends(require_admin)],
)
async def create_question(
    request: QuestionCreateRequest,
    session: AsyncSession = Depends(get_db),
) -> QuestionWithAnswersResponse:
    """Create a question and its answer choices in one transaction."""
    question = await QuestionService().create_question(
        session,
        answers=request.answers,
        **request.model_dump(exclude={"answers"}),
    )
    return QuestionWithAnswersResponse.model_validate(question)


@router.patch(
    "/{question_id}",
    response_model=QuestionWithAnswersResponse,
    summary="Update a question",
    description="Answer choices are not modified; use PUT /answers for those.",
    dependencies=[Depends(require_admin)],
)
async def update_question(
    question_id: int,
    request: QuestionUpdateRequest,
    session: AsyncSession = Depends(get_db),
) -> QuestionWithAnswersResponse:
    """Apply a partial update to a question."""
    question = await QuestionService().update_question(
        session, question_id, request.model_dump(exclude_unset=True)
    )
    return QuestionWithAnswersResponse.model_validate(question)


@router.put(
    "/{question_id}/answers",
    response_model=QuestionWithAnswersResponse,
    summary="Replace the answer choices of a question",
    description=(
        "Choices with a known id are updated in place, choices without one "
        "are created, and existing choices that are not listed are deleted."
    ),
    dependencies=[Depends(require_admin)],
)
async def replace_question_answers(
    question_id: int,
    request: AnswersReplaceRequest,
    session: AsyncSession = Depends(get_db),
) -> QuestionWithAnswersResponse:
    """Reconcile the answer set of a question."""
    question = await QuestionService().update_answers(
        session, question_id, request.answers
    )
    return QuestionWithAnswersResponse.model_validate(question)


@router.delete(
    "/{question_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a question",
    dependencies=[Depends(require_admin)],
)
async def delete_question(
    question_id: int,
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete a question and its answer choices."""
    await QuestionService().remove_question(session, question_id)
