"""Resolve a (domain, topic) pair to a documentation record, picking a random topic when none is given."""

import asyncio
import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.services.errors import DocumentationNotFoundError, InvalidDocumentationError
from app.utils.doc_walker import DOC_EXTENSION, iter_documentation_files
from app.utils.logging_config import get_logger

logger = get_logger("topics")


@dataclass(frozen=True)
class ResolvedTopic:
    """Documentation record together with where it came from."""

    domain_id: str
    topic_id: str
    path: Path
    record: Dict[str, Any]


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.resolve().relative_to(parent.resolve())
    except ValueError:
        return False
    return True


def list_topic_candidates(domain_path: Path) -> List[str]:
    """All topic ids of a domain, in walk order."""
    return [topic_id for _, topic_id in iter_documentation_files(domain_path)]


def load_record(path: Path) -> Dict[str, Any]:
    """Read one documentation file."""
    try:
        with open(path, encoding="utf-8") as f:
            record = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidDocumentationError(f"Documentation file is not valid JSON: {path} ({e})") from e
    if not isinstance(record, dict):
        raise InvalidDocumentationError(f"Documentation file must contain a JSON object: {path}")
    return record


def resolve_topic_sync(
    root: Path,
    domain_id: str,
    topic_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> ResolvedTopic:
    """
    Load the record at root/domain_id/topic_id.json.
    Without topic_id, choose uniformly among every documentation file in the domain.
    """
    root = Path(root)
    domain_path = root / domain_id
    if not _is_within(domain_path, root) or domain_path.resolve() == root.resolve():
        raise DocumentationNotFoundError("Domain folder not found", str(domain_path))

    if not topic_id:
        if not domain_path.is_dir():
            raise DocumentationNotFoundError("Domain folder not found", str(domain_path))
        candidates = list_topic_candidates(domain_path)
        if not candidates:
            raise DocumentationNotFoundError("No documentation files found in domain", str(domain_path))
        topic_id = (rng or random).choice(candidates)
        logger.info("No topic given, selected random topic", domain_id=domain_id, topic_id=topic_id)

    file_path = domain_path / f"{topic_id}{DOC_EXTENSION}"
    if not _is_within(file_path, domain_path) or not file_path.is_file():
        raise DocumentationNotFoundError("Documentation file not found", str(file_path))

    logger.info("Reading documentation", path=str(file_path))
    return ResolvedTopic(
        domain_id=domain_id,
        topic_id=topic_id,
        path=file_path,
        record=load_record(file_path),
    )


async def resolve_topic(
    root: Path,
    domain_id: str,
    topic_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> ResolvedTopic:
    """Run topic resolution in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: resolve_topic_sync(root, domain_id, topic_id, rng))
