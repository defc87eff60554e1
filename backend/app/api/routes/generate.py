"""Question generation endpoint."""

from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import (
    get_documentation_root,
    get_optional_collection_store,
    get_optional_user,
    get_question_generator,
)
from app.config import Settings, get_settings
from app.schemas.requests import GenerationRequest
from app.schemas.responses import GeneratedQuestion, User
from app.services.ai_service import QuestionGenerator
from app.services.enrichment import enrich_and_store
from app.services.errors import DocumentationNotFoundError, GenerationError, InvalidDocumentationError
from app.services.prompt_builder import build_prompt
from app.services.topic_resolver import resolve_topic
from app.utils.logging_config import get_logger

logger = get_logger("api.generate")

router = APIRouter(prefix="/generate", tags=["Generation"])


@router.post("", response_model=List[GeneratedQuestion], response_model_exclude_none=True)
async def generate_questions(
    body: GenerationRequest,
    root: Path = Depends(get_documentation_root),
    generator: QuestionGenerator = Depends(get_question_generator),
    store=Depends(get_optional_collection_store),
    user: Optional[User] = Depends(get_optional_user),
    settings: Settings = Depends(get_settings),
):
    """Generate multiple-choice questions from one documentation topic (random when topicId is empty)."""
    try:
        resolved = await resolve_topic(root, body.domain_id, body.topic_id)
    except DocumentationNotFoundError as e:
        logger.warning("Documentation not found", domain_id=body.domain_id, topic_id=body.topic_id, path=e.path)
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidDocumentationError as e:
        logger.error("Documentation file unreadable", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    prompt = build_prompt(resolved.record, body.difficulty, body.count)

    try:
        questions = await generator.generate(prompt, resolved.record, body.difficulty, body.count)
    except GenerationError as e:
        raise HTTPException(status_code=500, detail=f"Failed to generate questions: {e}")

    return await enrich_and_store(
        questions,
        domain_id=resolved.domain_id,
        topic_id=resolved.topic_id,
        collection_name=body.collection_name,
        user=user,
        store=store,
        default_collection_name=settings.default_collection_name,
    )
