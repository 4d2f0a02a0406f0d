from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # snake_case in Python and Mongo, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttemptStatus(str, Enum):
    UNATTEMPTED = "unattempted"
    ATTEMPTED = "attempted"


class Question(CamelModel):
    question: str
    options: list[str] = Field(min_length=4, max_length=4)
    answer: int = Field(ge=0, le=3)
    explanation: str


class Quiz(CamelModel):
    id: str = Field(alias="_id")
    email: str
    topic: str
    difficulty: str = "Medium"
    questions: list[Question]
    selected_answers: dict[str, Any] = {}
    score: float = 0
    attempt_status: AttemptStatus = AttemptStatus.UNATTEMPTED
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        return str(value)


class QuizSummary(CamelModel):
    id: str = Field(alias="_id")
    topic: str
    difficulty: str
    attempted: bool
    score: float | None = None
    created_at: datetime
    updated_at: datetime
    quiz: Quiz
    answers: dict[str, Any]

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizSummary":
        return cls(
            id=quiz.id,
            topic=quiz.topic or "General",
            difficulty=quiz.difficulty or "Medium",
            attempted=quiz.attempt_status == AttemptStatus.ATTEMPTED,
            score=quiz.score,
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
            quiz=quiz,
            answers=quiz.selected_answers or {},
        )


class User(CamelModel):
    id: str = Field(alias="_id")
    name: str | None = None
    email: str
    role: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        return str(value)


# Request bodies. Required fields are optional here so that a missing value
# becomes a 400 from the route instead of FastAPI's 422.

class GeneratedQuiz(CamelModel):
    quiz_id: str
    topic: str
    difficulty: str
    questions: list[Question]


class SubmitRequest(CamelModel):
    quiz_id: str | None = None
    selected_answers: dict[str, Any] | None = None
    score: Any = None


class SubmitResponse(CamelModel):
    message: str
    quiz: Quiz


class UserCreate(CamelModel):
    name: str | None = None
    email: str | None = None
    role: str | None = None


class UserUpdate(CamelModel):
    name: str | None = None
    role: str | None = None
