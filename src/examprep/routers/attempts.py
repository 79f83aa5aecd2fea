"""Answer submission and statistics endpoints."""

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.auth import CallerIdentity, get_caller_identity, require_identity
from examprep.db import get_db
from examprep.schemas import ErrorResponse
from examprep.schemas.attempt import (
    AnswerHistoryEntry,
    AnsweredStatusResponse,
    AnswerSubmissionRequest,
    AnswerSubmissionResponse,
    LastAttempt,
    QuestionStatsResponse,
    SelectedAnswerSummary,
    UserPerformanceResponse,
)
from examprep.services.attempt import UserAnswerService

router = APIRouter(
    tags=["Attempts"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post(
    "/questions/{question_id}/attempts",
    response_model=AnswerSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an answer",
    description=(
        "Record the caller's selected answer choice. Correctness is taken "
        "from the stored choice; every call records a new attempt."
    ),
)
async def submit_answer(
    question_id: int,
    request: AnswerSubmissionRequest,
    identity: CallerIdentity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> AnswerSubmissionResponse:
    """Submit an answer and return its correctness with the explanation."""
    logger.info(
        "Answer submission requested",
        question_id=question_id,
        selected_answer_id=request.selected_answer_id,
    )

    result = await UserAnswerService().submit_answer(
        session,
        identity,
        question_id=question_id,
        selected_answer_id=request.selected_answer_id,
        time_spent_ms=request.time_spent_ms,
    )

    return AnswerSubmissionResponse(
        user_answer_id=result.user_answer.id,
        is_correct=result.is_correct,
        explanation=result.explanation,
        selected_answer=SelectedAnswerSummary.model_validate(result.selected_answer),
    )


@router.get(
    "/questions/{question_id}/attempts/me",
    response_model=list[AnswerHistoryEntry],
    summary="Get the caller's attempts at a question",
    description="Most recent first. Empty for anonymous or unknown callers.",
)
async def get_answer_history(
    question_id: int,
    identity: CallerIdentity | None = Depends(get_caller_identity),
    session: AsyncSession = Depends(get_db),
) -> list[AnswerHistoryEntry]:
    """Return the caller's answer history for a question."""
    history = await UserAnswerService().get_user_answer_history(
        session, identity, question_id
    )
    return [
        AnswerHistoryEntry(
            id=attempt.id,
            created_at=attempt.created_at,
            is_correct=attempt.is_correct,
            time_spent_ms=attempt.time_spent_ms,
            selected_answer=(
                SelectedAnswerSummary.model_validate(choice) if choice else None
            ),
        )
        for attempt, choice in history
    ]


@router.get(
    "/questions/{question_id}/attempts/me/latest",
    response_model=AnsweredStatusResponse,
    summary="Check whether the caller has answered a question",
)
async def has_answered_question(
    question_id: int,
    identity: CallerIdentity | None = Depends(get_caller_identity),
    session: AsyncSession = Depends(get_db),
) -> AnsweredStatusResponse:
    """Return whether the caller has answered, with the latest result."""
    answered = await UserAnswerService().has_user_answered_question(
        session, identity, question_id
    )
    return AnsweredStatusResponse(
        has_answered=answered.has_answered,
        last_attempt=(
            LastAttempt.model_validate(answered.last_attempt)
            if answered.last_attempt
            else None
        ),
    )


@router.get(
    "/questions/{question_id}/stats",
    response_model=QuestionStatsResponse,
    summary="Get attempt statistics for a question",
)
async def get_question_stats(
    question_id: int,
    session: AsyncSession = Depends(get_db),
) -> QuestionStatsResponse:
    """Aggregate all users' attempts at a question."""
    stats = await UserAnswerService().get_question_stats(session, question_id)
    return QuestionStatsResponse.model_validate(stats)


@router.get(
    "/performance/me",
    response_model=UserPerformanceResponse | None,
    summary="Get the caller's overall performance",
    description="Null for anonymous or unknown callers.",
)
async def get_user_performance(
    identity: CallerIdentity | None = Depends(get_caller_identity),
    session: AsyncSession = Depends(get_db),
) -> UserPerformanceResponse | None:
    """Aggregate the caller's attempts across all questions."""
    performance = await UserAnswerService().get_user_performance(session, identity)
    if performance is None:
        return None
    return UserPerformanceResponse.model_validate(performance)
