"""Quiz attempt scores."""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_collection_store, get_current_user, get_performance_store
from app.schemas.requests import CreatePerformanceRequest
from app.schemas.responses import PerformanceRecord, PerformanceWithCollection, User
from app.services.enrichment import utc_now_iso
from app.utils.logging_config import get_logger

logger = get_logger("api.performance")

router = APIRouter(prefix="/performance", tags=["Performance"])

UNKNOWN_COLLECTION = "Unknown Collection"


@router.get("", response_model=List[PerformanceWithCollection])
async def list_performance(
    user: User = Depends(get_current_user),
    performance=Depends(get_performance_store),
    collections=Depends(get_collection_store),
):
    """The caller's quiz history with collection names joined in."""
    records = [p for p in await performance.get_all() if p.user_id == user.id]
    names = {c.id: c.name for c in await collections.get_all()}
    return [
        PerformanceWithCollection(
            **p.model_dump(),
            collection_name=names.get(p.collection_id, UNKNOWN_COLLECTION),
        )
        for p in records
    ]


@router.post("", response_model=PerformanceRecord, status_code=201)
async def record_performance(
    body: CreatePerformanceRequest,
    user: User = Depends(get_current_user),
    performance=Depends(get_performance_store),
):
    if body.score > body.total_questions:
        raise HTTPException(status_code=400, detail="score cannot exceed totalQuestions")

    record = PerformanceRecord(
        id=str(uuid.uuid4()),
        user_id=user.id,
        collection_id=body.collection_id,
        score=body.score,
        total_questions=body.total_questions,
        answers=body.answers,
        date=utc_now_iso(),
    )
    try:
        await performance.save(record)
    except Exception as e:
        logger.exception("Error saving performance", user_id=user.id)
        raise HTTPException(status_code=500, detail=f"Could not save performance: {e}")
    return record
