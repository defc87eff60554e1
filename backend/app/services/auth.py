"""Bearer-token user lookup: a shared demo token, or a Google ID token."""

import asyncio
import uuid
from typing import Any, Dict, Optional

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from app.config import Settings
from app.schemas.responses import User
from app.services.store import JsonFileStore
from app.utils.logging_config import get_logger

logger = get_logger("auth")


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def demo_user(settings: Settings) -> User:
    return User(
        id=settings.demo_user_id,
        google_id="demo-google-id",
        email="guest@docquiz.demo",
        name="Guest User",
        picture="https://ui-avatars.com/api/?name=Guest+User",
    )


def verify_google_token(token: str, client_id: str) -> Dict[str, Any]:
    """Verify signature, expiry and audience of a Google ID token (blocking)."""
    return id_token.verify_oauth2_token(token, google_requests.Request(), audience=client_id)


async def _find_or_create(users: JsonFileStore[User], candidate: User, by_google_id: bool) -> User:
    def match(existing: User) -> bool:
        if by_google_id:
            return existing.google_id == candidate.google_id
        return existing.id == candidate.id

    user, created = await users.find_or_save(match, candidate)
    if created:
        logger.info("Registered user", user_id=user.id, email=user.email)
    return user


async def authenticate(
    authorization: Optional[str],
    users: JsonFileStore[User],
    settings: Settings,
) -> Optional[User]:
    """Resolve the caller, or None for anonymous / invalid credentials."""
    token = extract_bearer_token(authorization)
    if not token:
        return None

    if token == settings.demo_token:
        return await _find_or_create(users, demo_user(settings), by_google_id=False)

    if not settings.google_client_id:
        logger.warning("Bearer token rejected, GOOGLE_CLIENT_ID is not configured")
        return None

    loop = asyncio.get_running_loop()
    try:
        payload = await loop.run_in_executor(None, lambda: verify_google_token(token, settings.google_client_id))
    except Exception as e:
        logger.warning("Auth error", error=str(e))
        return None

    candidate = User(
        id=str(uuid.uuid4()),
        google_id=payload["sub"],
        email=payload.get("email", ""),
        name=payload.get("name", ""),
        picture=payload.get("picture") or None,
    )
    return await _find_or_create(users, candidate, by_google_id=True)
