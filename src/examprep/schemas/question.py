"""Pydantic schemas for question and answer choice endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from examprep.models.question import Difficulty


class AnswerChoiceInput(BaseModel):
    """A single answer choice supplied when creating a question."""

    choice_text: str = Field(..., min_length=1, examples=["A. Atrial fibrillation"])
    choice_letter: str = Field(..., min_length=1, max_length=8, examples=["A"])
    is_correct: bool = Field(..., description="Only one choice may be correct")
    image_ref: str | None = Field(None, description="Storage id of choice image")
    order: int = Field(..., ge=0, description="Display order")


class AnswerChoiceUpdateInput(AnswerChoiceInput):
    """Answer choice for set replacement; an id patches, no id inserts."""

    id: int | None = Field(None, description="Existing answer choice ID")


class QuestionCreateRequest(BaseModel):
    """Request model for creating a question with its answer choices."""

    question_text: str = Field(..., min_length=1)
    image_ref: str | None = None
    audio_ref: str | None = None
    video_ref: str | None = None
    difficulty: Difficulty
    explanation: str = Field(..., description="Why the correct answer is correct")
    category_ids: list[int] = Field(..., min_length=1)
    is_active: bool = True
    order: int | None = None
    answers: list[AnswerChoiceInput] = Field(..., min_length=1)


class QuestionUpdateRequest(BaseModel):
    """Request model for partially updating a question (not its answers)."""

    question_text: str | None = Field(None, min_length=1)
    image_ref: str | None = None
    audio_ref: str | None = None
    video_ref: str | None = None
    difficulty: Difficulty | None = None
    explanation: str | None = None
    category_ids: list[int] | None = Field(None, min_length=1)
    is_active: bool | None = None
    order: int | None = None

    @field_validator(
        "question_text",
        "difficulty",
        "explanation",
        "category_ids",
        "is_active",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v: object) -> object:
        """Required columns may be omitted but not cleared."""
        if v is None:
            raise ValueError("field cannot be null")
        return v


class AnswersReplaceRequest(BaseModel):
    """Request model for replacing the full answer set of a question."""

    answers: list[AnswerChoiceUpdateInput] = Field(..., min_length=1)


class AnswerChoiceResponse(BaseModel):
    """Response model for an answer choice."""

    id: int
    question_id: int
    choice_text: str
    choice_letter: str
    is_correct: bool
    image_ref: str | None = None
    order: int

    model_config = {"from_attributes": True}


class QuestionResponse(BaseModel):
    """Response model for a question without its choices."""

    id: int = Field(..., description="Question ID")
    question_text: str
    image_ref: str | None = None
    audio_ref: str | None = None
    video_ref: str | None = None
    difficulty: Difficulty
    explanation: str
    category_ids: list[int] = Field(default_factory=list)
    is_active: bool
    order: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class QuestionWithAnswersResponse(QuestionResponse):
    """Question together with its choices sorted by display order."""

    answers: list[AnswerChoiceResponse] = Field(default_factory=list)
