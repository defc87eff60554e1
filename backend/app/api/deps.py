"""FastAPI dependencies: settings-driven services and the current user."""

from pathlib import Path
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.config import Settings, get_settings
from app.schemas.responses import User
from app.services.ai_service import QuestionGenerator, build_question_generator
from app.services.auth import authenticate
from app.services.store import (
    JsonFileStore,
    build_collection_store,
    build_performance_store,
    build_user_store,
)
from app.utils.logging_config import get_logger

logger = get_logger("api.deps")


def get_documentation_root(settings: Settings = Depends(get_settings)) -> Path:
    return Path(settings.documentation_root)


def get_question_generator(settings: Settings = Depends(get_settings)) -> QuestionGenerator:
    try:
        return build_question_generator(settings)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Question generator unavailable: {e}",
        ) from e


def get_collection_store(settings: Settings = Depends(get_settings)):
    try:
        return build_collection_store(settings)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Collection store unavailable: {e}",
        ) from e


def get_optional_collection_store(settings: Settings = Depends(get_settings)):
    """Collection store for best-effort saves; None when the backend cannot be built."""
    try:
        return build_collection_store(settings)
    except Exception as e:
        logger.exception("Collection store unavailable", backend=settings.collection_backend, error=str(e))
        return None


def get_user_store(settings: Settings = Depends(get_settings)) -> JsonFileStore[User]:
    return build_user_store(settings)


def get_performance_store(settings: Settings = Depends(get_settings)):
    return build_performance_store(settings)


async def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    users: JsonFileStore[User] = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> Optional[User]:
    return await authenticate(authorization, users, settings)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user
