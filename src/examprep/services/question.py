"""Question service owning questions and their answer choice sets."""

from collections import Counter
from collections.abc import Sequence
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.exceptions import DomainValidationError, NotFoundError
from examprep.models.answer_choice import AnswerChoice
from examprep.models.category import Category
from examprep.models.question import Question
from examprep.repositories.category import CategoryRepository
from examprep.repositories.question import QuestionRepository
from examprep.schemas.question import AnswerChoiceInput, AnswerChoiceUpdateInput

_CHOICE_FIELDS = ("choice_text", "choice_letter", "is_correct", "image_ref", "order")


class QuestionService:
    """Create, query, update and delete questions.

    Every question keeps exactly one correct answer choice. Multi-row
    writes rely on the caller's session transaction to apply atomically.
    """

    async def list_active(self, session: AsyncSession) -> list[Question]:
        """Return all published questions."""
        return await QuestionRepository.get_active(session)

    async def list_all(self, session: AsyncSession) -> list[Question]:
        """Return all questions, drafts included."""
        return await QuestionRepository.get_all(session)

    async def list_by_category(
        self,
        session: AsyncSession,
        category_id: int,
    ) -> list[Question]:
        """Return published questions in a category."""
        return await QuestionRepository.get_active_by_category(session, category_id)

    async def get_with_answers(
        self,
        session: AsyncSession,
        question_id: int,
    ) -> Question | None:
        """Return a question with its choices, or None if it does not exist."""
        return await QuestionRepository.get_by_id(session, question_id)

    async def create_question(
        self,
        session: AsyncSession,
        answers: Sequence[AnswerChoiceInput],
        category_ids: list[int],
        **fields: Any,
    ) -> Question:
        """Create a question together with its answer choices."""
        _ensure_single_correct(answers)
        categories = await _resolve_categories(session, category_ids)

        question = await QuestionRepository.create(
            session,
            categories=categories,
            answers=[
                AnswerChoice(**answer.model_dump(include=set(_CHOICE_FIELDS)))
                for answer in answers
            ],
            **fields,
        )
        logger.info(
            "Question created",
            question_id=question.id,
            answer_count=len(question.answers),
            category_ids=question.category_ids,
        )
        return question

    async def update_question(
        self,
        session: AsyncSession,
        question_id: int,
        updates: dict[str, Any],
    ) -> Question:
        """Patch question fields; answer choices are left untouched."""
        question = await QuestionRepository.get_by_id(session, question_id)
        if question is None:
            raise NotFoundError(resource="Question", resource_id=question_id)

        updates = dict(updates)
        if "category_ids" in updates:
            updates["categories"] = await _resolve_categories(
                session, updates.pop("category_ids")
            )

        question = await QuestionRepository.update(session, question, updates)
        logger.info(
            "Question updated",
            question_id=question_id,
            fields=sorted(updates),
        )
        return question

    async def update_answers(
        self,
        session: AsyncSession,
        question_id: int,
        answers: Sequence[AnswerChoiceUpdateInput],
    ) -> Question:
        """Replace the answer set of a question, reconciling by choice id.

        Existing choices whose id is not supplied are deleted, supplied ids
        that match an existing choice are patched in place, and the rest
        are inserted as new choices.
        """
        _ensure_single_correct(answers)
        _ensure_unique_ids(answers)

        question = await QuestionRepository.get_by_id(session, question_id)
        if question is None:
            raise NotFoundError(resource="Question", resource_id=question_id)

        existing = {choice.id: choice for choice in question.answers}
        provided_ids = {answer.id for answer in answers if answer.id is not None}

        removed = [choice for choice in question.answers if choice.id not in provided_ids]
        for choice in removed:
            question.answers.remove(choice)

        patched = inserted = 0
        for answer in answers:
            values = answer.model_dump(include=set(_CHOICE_FIELDS))
            choice = existing.get(answer.id) if answer.id is not None else None
            if choice is not None:
                for field, value in values.items():
                    setattr(choice, field, value)
                patched += 1
            else:
                question.answers.append(AnswerChoice(**values))
                inserted += 1

        question = await QuestionRepository.refresh(session, question)
        logger.info(
            "Question answers reconciled",
            question_id=question_id,
            deleted=len(removed),
            patched=patched,
            inserted=inserted,
        )
        return question

    async def remove_question(self, session: AsyncSession, question_id: int) -> None:
        """Delete a question along with its answer choices."""
        question = await QuestionRepository.get_by_id(session, question_id)
        if question is None:
            raise NotFoundError(resource="Question", resource_id=question_id)

        answer_count = len(question.answers)
        await QuestionRepository.delete(session, question)
        logger.info(
            "Question deleted",
            question_id=question_id,
            answer_count=answer_count,
        )


def _ensure_unique_ids(answers: Sequence[AnswerChoiceUpdateInput]) -> None:
    counts = Counter(answer.id for answer in answers if answer.id is not None)
    duplicate_ids = sorted(choice_id for choice_id, count in counts.items() if count > 1)
    if duplicate_ids:
        raise DomainValidationError(
            "Each answer choice id may appear only once",
            field="answers",
            details={"duplicate_ids": duplicate_ids},
        )


def _ensure_single_correct(answers: Sequence[AnswerChoiceInput]) -> None:
    correct_count = sum(1 for answer in answers if answer.is_correct)
    if correct_count != 1:
        raise DomainValidationError(
            "Exactly one answer must be marked as correct",
            field="answers",
            details={"correct_count": correct_count},
        )


async def _resolve_categories(
    session: AsyncSession,
    category_ids: list[int],
) -> list[Category]:
    """Load categories in the given order; fail on the first unknown id."""
    if not category_ids:
        raise DomainValidationError(
            "A question must belong to at least one category",
            field="category_ids",
        )

    categories = []
    for category_id in dict.fromkeys(category_ids):
        category = await CategoryRepository.get_by_id(session, category_id)
        if category is None:
            raise NotFoundError(resource="Category", resource_id=category_id)
        categories.append(category)
    return categories
