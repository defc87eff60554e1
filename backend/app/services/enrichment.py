"""Provenance tagging and optional collection persistence for generated questions."""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from app.schemas.responses import Collection, GeneratedQuestion, User
from app.utils.doc_walker import TOPIC_DELIMITER
from app.utils.logging_config import get_logger

logger = get_logger("enrichment")

DEFAULT_COLLECTION_NAME = "Auto Generated"


def build_tags(domain_id: str, topic_id: str) -> List[str]:
    """react19 + hooks/useState -> ["react19", "hooks", "useState"]"""
    return [tag for tag in [domain_id, *topic_id.split(TOPIC_DELIMITER)] if tag]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def enrich_and_store(
    questions: List[GeneratedQuestion],
    domain_id: str,
    topic_id: str,
    collection_name: Optional[str] = None,
    user: Optional[User] = None,
    store=None,
    default_collection_name: str = DEFAULT_COLLECTION_NAME,
) -> List[GeneratedQuestion]:
    """
    Attach the same tags and collection name to every question.
    Saves a Collection only for a named request from an authenticated user; a failed save is logged, not raised.
    """
    tags = build_tags(domain_id, topic_id)
    enriched = [
        q.model_copy(update={"tags": list(tags), "collection_name": collection_name or default_collection_name})
        for q in questions
    ]

    if collection_name and user and store is None:
        logger.warning("No collection store available, collection not saved", collection=collection_name, user_id=user.id)
    elif collection_name and user:
        collection = Collection(
            id=str(uuid.uuid4()),
            name=collection_name,
            owner_id=user.id,
            questions=enriched,
            created_at=utc_now_iso(),
            tags=list(tags),
        )
        try:
            await store.save(collection)
            logger.info("Saved collection", collection=collection_name, collection_id=collection.id, user=user.email)
        except Exception:
            logger.exception("Failed to save collection automatically", collection=collection_name, user_id=user.id)

    return enriched
