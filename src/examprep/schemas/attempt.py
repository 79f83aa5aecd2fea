"""Pydantic schemas for answer submission and statistics endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class AnswerSubmissionRequest(BaseModel):
    """Request model for submitting an answer to a question."""

    selected_answer_id: int = Field(..., description="Chosen answer choice ID")
    time_spent_ms: int | None = Field(
        None, ge=0, description="Time spent on the question in milliseconds"
    )


class SelectedAnswerSummary(BaseModel):
    """Display fields of the chosen answer choice."""

    id: int | None = None
    choice_text: str
    choice_letter: str

    model_config = {"from_attributes": True}


class AnswerSubmissionResponse(BaseModel):
    """Result of a submitted answer."""

    user_answer_id: int = Field(..., description="Recorded attempt ID")
    is_correct: bool
    explanation: str
    selected_answer: SelectedAnswerSummary


class AnswerHistoryEntry(BaseModel):
    """One past attempt of the caller at a question."""

    id: int
    created_at: datetime
    is_correct: bool
    time_spent_ms: int | None = None
    selected_answer: SelectedAnswerSummary | None = None


class QuestionStatsResponse(BaseModel):
    """Aggregate attempt statistics for a question."""

    total_attempts: int = Field(..., ge=0)
    correct_attempts: int = Field(..., ge=0)
    success_rate: float = Field(..., ge=0.0, le=100.0, description="Percent correct")
    average_time_ms: float | None = None

    model_config = {"from_attributes": True}


class UserPerformanceResponse(QuestionStatsResponse):
    """Aggregate attempt statistics for the caller across all questions."""

    unique_questions_answered: int = Field(..., ge=0)


class LastAttempt(BaseModel):
    """Outcome of the most recent attempt."""

    is_correct: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AnsweredStatusResponse(BaseModel):
    """Whether the caller has answered a question, with the latest result."""

    has_answered: bool
    last_attempt: LastAttempt | None = None
