"""Saved question collections."""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_collection_store, get_current_user
from app.config import Settings, get_settings
from app.schemas.requests import CreateCollectionRequest
from app.schemas.responses import Collection, CollectionSummary, User
from app.services.enrichment import utc_now_iso
from app.utils.logging_config import get_logger

logger = get_logger("api.collections")

router = APIRouter(prefix="/collections", tags=["Collections"])


@router.get("", response_model=List[CollectionSummary])
async def list_collections(
    user: User = Depends(get_current_user),
    store=Depends(get_collection_store),
    settings: Settings = Depends(get_settings),
):
    """Collections owned by the caller, plus the shared ones owned by the demo user."""
    collections = await store.get_all()
    visible = [c for c in collections if c.owner_id in (user.id, settings.demo_user_id)]
    return [
        CollectionSummary(
            id=c.id,
            name=c.name,
            questions_count=len(c.questions),
            created_at=c.created_at,
            tags=c.tags,
        )
        for c in visible
    ]


@router.post("", response_model=Collection, status_code=201, response_model_exclude_none=True)
async def create_collection(
    body: CreateCollectionRequest,
    user: User = Depends(get_current_user),
    store=Depends(get_collection_store),
):
    collection = Collection(
        id=str(uuid.uuid4()),
        name=body.name,
        owner_id=user.id,
        questions=body.questions,
        created_at=utc_now_iso(),
        tags=body.tags,
    )
    try:
        await store.save(collection)
    except Exception as e:
        logger.exception("Error creating collection", user_id=user.id)
        raise HTTPException(status_code=500, detail=f"Could not save collection: {e}")
    return collection


@router.get("/{collection_id}", response_model=Collection, response_model_exclude_none=True)
async def get_collection(
    collection_id: str,
    user: User = Depends(get_current_user),
    store=Depends(get_collection_store),
):
    # Readable by anyone holding the id.
    for collection in await store.get_all():
        if collection.id == collection_id:
            return collection
    raise HTTPException(status_code=404, detail="Collection not found")
