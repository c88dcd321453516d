"""Pydantic models for the conversion quiz."""

from uuid import UUID

import uuid_utils.compat as uuid
from pydantic import BaseModel, Field


class QuizQuestion(BaseModel):
    """An integer conversion the user is asked to perform."""

    question_id: UUID = Field(default_factory=uuid.uuid7)
    value: str = Field(..., description="Numeral in the source base")
    source_base: int = Field(..., ge=2, le=36)
    target_base: int = Field(..., ge=2, le=36)


class QuizAnswer(QuizQuestion):
    """A question together with the user's answer."""

    answer: str = Field(..., description="User's answer in the target base")


class QuizAnswerResult(QuizAnswer):
    """A graded answer."""

    correct_answer: str
    is_correct: bool


class QuizGradeRequest(BaseModel):
    """Answers submitted for grading."""

    answers: list[QuizAnswer] = Field(..., min_length=1)


class QuizResult(BaseModel):
    """Score for a graded quiz."""

    score: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    results: list[QuizAnswerResult] = Field(default_factory=list)
