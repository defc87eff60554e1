"""Response schemas for API responses."""

import uuid
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

from app.schemas.base import CamelModel


class CatalogTopic(BaseModel):
    """Single documentation topic inside a domain."""

    id: str = Field(..., description="Topic path inside the domain, e.g. hooks/useState")
    name: str
    type: str = Field(..., description="Parent folder name, or 'general' for top-level files")


class CatalogEntry(BaseModel):
    """Documentation domain with its topics."""

    id: str
    name: str
    topics: List[CatalogTopic]


class QuestionContent(BaseModel):
    """Question body; field names match the prompt's JSON schema."""

    question_text: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct_answer_index: int
    code_snippet: Optional[str] = None

    @model_validator(mode="after")
    def _check_answer_index(self) -> "QuestionContent":
        if not 0 <= self.correct_answer_index < len(self.options):
            raise ValueError(
                f"correct_answer_index {self.correct_answer_index} is out of range for {len(self.options)} options"
            )
        return self


class GeneratedQuestion(CamelModel):
    """Single multiple-choice question."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: str = "multiple_choice"
    content: QuestionContent
    explanation: str = ""
    tags: List[str] = Field(default_factory=list)
    collection_name: Optional[str] = None


class User(CamelModel):
    """Authenticated user."""

    id: str
    email: str = ""
    name: str = ""
    picture: Optional[str] = None
    google_id: str = ""


class Collection(CamelModel):
    """Saved, named set of questions owned by a user."""

    id: str
    name: str
    owner_id: str = Field(
        ...,
        validation_alias=AliasChoices("ownerId", "userId", "owner_id"),
        serialization_alias="ownerId",
    )
    questions: List[GeneratedQuestion]
    created_at: str
    tags: Optional[List[str]] = None


class CollectionSummary(CamelModel):
    """Collection listing entry without the questions."""

    id: str
    name: str
    questions_count: int
    created_at: str
    tags: Optional[List[str]] = None


class PerformanceRecord(CamelModel):
    """Score of one quiz attempt."""

    id: str
    user_id: str
    collection_id: str
    score: int
    total_questions: int
    answers: List[Any] = Field(default_factory=list)
    date: str


class PerformanceWithCollection(PerformanceRecord):
    """Performance record joined with its collection name."""

    collection_name: str
