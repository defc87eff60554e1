"""Request schemas for API validation."""

from typing import Any, List, Literal, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.base import CamelModel
from app.schemas.responses import GeneratedQuestion

Difficulty = Literal["beginner", "intermediate", "advanced"]

MAX_QUESTION_COUNT = 10


class GenerationRequest(CamelModel):
    """Request body for question generation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    domain_id: str = Field(..., min_length=1, description="Top-level documentation folder, e.g. react19")
    topic_id: Optional[str] = Field(
        None, description="Topic path inside the domain, e.g. hooks/useState. Empty picks a random topic."
    )
    difficulty: Difficulty = "beginner"
    count: int = Field(5, ge=1, le=MAX_QUESTION_COUNT)
    collection_name: Optional[str] = Field(None, description="Save the generated questions under this name")


class CreateCollectionRequest(CamelModel):
    """Request body for saving a collection of questions."""

    name: str = Field(..., min_length=1)
    questions: List[GeneratedQuestion]
    tags: Optional[List[str]] = None


class CreatePerformanceRequest(CamelModel):
    """Request body for recording a quiz attempt."""

    collection_id: str = Field(..., min_length=1)
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1)
    answers: List[Any] = Field(default_factory=list)
