"""Answer submission and attempt statistics."""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.auth import CallerIdentity
from examprep.exceptions import DomainValidationError, NotFoundError, UnauthenticatedError
from examprep.models.answer_choice import AnswerChoice
from examprep.models.user import User
from examprep.models.user_answer import UserAnswer
from examprep.repositories.answer_choice import AnswerChoiceRepository
from examprep.repositories.question import QuestionRepository
from examprep.repositories.user import UserRepository
from examprep.repositories.user_answer import UserAnswerRepository


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a recorded attempt."""

    user_answer: UserAnswer
    is_correct: bool
    explanation: str
    selected_answer: AnswerChoice


@dataclass(frozen=True)
class QuestionStats:
    """Attempt totals for a question."""

    total_attempts: int
    correct_attempts: int
    success_rate: float
    average_time_ms: float | None


@dataclass(frozen=True)
class UserPerformance(QuestionStats):
    """Attempt totals for a user across questions."""

    unique_questions_answered: int


@dataclass(frozen=True)
class AnsweredStatus:
    """Whether a user has attempted a question, and the latest attempt."""

    has_answered: bool
    last_attempt: UserAnswer | None = None


def success_rate(correct_attempts: int, total_attempts: int) -> float:
    """Percentage of correct attempts; 0 when there are no attempts."""
    if total_attempts == 0:
        return 0.0
    return correct_attempts / total_attempts * 100


class UserAnswerService:
    """Record answer attempts and aggregate them into statistics."""

    async def submit_answer(
        self,
        session: AsyncSession,
        identity: CallerIdentity | None,
        question_id: int,
        selected_answer_id: int,
        time_spent_ms: int | None = None,
    ) -> SubmissionResult:
        """Score a selected choice and append the attempt.

        Correctness always comes from the stored choice. Every successful
        call appends exactly one new attempt row.
        """
        if identity is None:
            raise UnauthenticatedError()

        user = await UserRepository.get_by_external_id(session, identity.subject)
        if user is None:
            raise NotFoundError(resource="User", resource_id=identity.subject)

        selected_answer = await AnswerChoiceRepository.get_by_id(
            session, selected_answer_id
        )
        if selected_answer is None:
            raise NotFoundError(resource="AnswerChoice", resource_id=selected_answer_id)

        if selected_answer.question_id != question_id:
            raise DomainValidationError(
                "Answer choice does not belong to this question",
                field="selected_answer_id",
                details={
                    "question_id": question_id,
                    "selected_answer_id": selected_answer_id,
                },
            )

        question = await QuestionRepository.get_by_id(session, question_id)
        if question is None:
            raise NotFoundError(resource="Question", resource_id=question_id)

        user_answer = await UserAnswerRepository.create(
            session,
            user_id=user.id,
            question_id=question_id,
            selected_answer_id=selected_answer.id,
            is_correct=selected_answer.is_correct,
            time_spent_ms=time_spent_ms,
        )

        logger.info(
            "Answer recorded",
            user_id=user.id,
            question_id=question_id,
            user_answer_id=user_answer.id,
            is_correct=user_answer.is_correct,
        )

        return SubmissionResult(
            user_answer=user_answer,
            is_correct=user_answer.is_correct,
            explanation=question.explanation,
            selected_answer=selected_answer,
        )

    async def get_user_answer_history(
        self,
        session: AsyncSession,
        identity: CallerIdentity | None,
        question_id: int,
    ) -> list[tuple[UserAnswer, AnswerChoice | None]]:
        """Return the caller's attempts at a question, most recent first."""
        user = await self._resolve_user(session, identity)
        if user is None:
            return []
        return await UserAnswerRepository.get_history_with_choices(
            session, user.id, question_id
        )

    async def get_question_stats(
        self,
        session: AsyncSession,
        question_id: int,
    ) -> QuestionStats:
        """Aggregate all users' attempts at a question."""
        aggregate = await UserAnswerRepository.aggregate_for_question(
            session, question_id
        )
        return QuestionStats(
            total_attempts=aggregate.total_attempts,
            correct_attempts=aggregate.correct_attempts,
            success_rate=success_rate(
                aggregate.correct_attempts, aggregate.total_attempts
            ),
            average_time_ms=aggregate.average_time_ms,
        )

    async def get_user_performance(
        self,
        session: AsyncSession,
        identity: CallerIdentity | None,
    ) -> UserPerformance | None:
        """Aggregate the caller's attempts, or None without a known caller."""
        user = await self._resolve_user(session, identity)
        if user is None:
            return None

        aggregate = await UserAnswerRepository.aggregate_for_user(
            session, user.id
        )
        return UserPerformance(
            total_attempts=aggregate.total_attempts,
            correct_attempts=aggregate.correct_attempts,
            success_rate=success_rate(
                aggregate.correct_attempts, aggregate.total_attempts
            ),
            average_time_ms=aggregate.average_time_ms,
            unique_questions_answered=aggregate.unique_questions,
        )

    async def has_user_answered_question(
        self,
        session: AsyncSession,
        identity: CallerIdentity | None,
        question_id: int,
    ) -> AnsweredStatus:
        """Report whether the caller has attempted a question."""
        user = await self._resolve_user(session, identity)
        if user is None:
            return AnsweredStatus(has_answered=False)

        latest = await UserAnswerRepository.get_latest(session, user.id, question_id)
        if latest is None:
            return AnsweredStatus(has_answered=False)
        return AnsweredStatus(has_answered=True, last_attempt=latest)

    @staticmethod
    async def _resolve_user(
        session: AsyncSession,
        identity: CallerIdentity | None,
    ) -> User | None:
        if identity is None:
            return None
        return await UserRepository.get_by_external_id(session, identity.subject)
