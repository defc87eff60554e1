"""Documentation catalog: domains and topics discovered from the documentation folder."""

import asyncio
import os
from pathlib import Path
from typing import List

from app.schemas.responses import CatalogEntry, CatalogTopic
from app.services.errors import DocumentationNotFoundError
from app.utils.doc_walker import TOPIC_DELIMITER, iter_documentation_files
from app.utils.logging_config import get_logger

logger = get_logger("catalog")

GENERAL_TOPIC_TYPE = "general"

DOMAIN_DISPLAY_NAMES = {
    "react19": "React 19",
    "nodejs": "Node.js",
    "typescript": "TypeScript",
    "postgres": "PostgreSQL",
}


def format_domain_name(domain_id: str) -> str:
    """react19 -> React 19; anything unknown gets its first letter capitalised."""
    if domain_id in DOMAIN_DISPLAY_NAMES:
        return DOMAIN_DISPLAY_NAMES[domain_id]
    return domain_id[:1].upper() + domain_id[1:]


def _topic_from_id(topic_id: str) -> CatalogTopic:
    parts = topic_id.split(TOPIC_DELIMITER)
    topic_type = parts[-2] if len(parts) > 1 else GENERAL_TOPIC_TYPE
    return CatalogTopic(id=topic_id, name=parts[-1], type=topic_type)


def scan_catalog(root: Path) -> List[CatalogEntry]:
    """
    Scan the documentation root into domain -> topics.
    Recomputed on every call; nothing is cached.
    """
    root = Path(root)
    if not root.is_dir():
        raise DocumentationNotFoundError("Documentation folder not found", str(root))

    try:
        with os.scandir(root) as it:
            domain_dirs = sorted(
                (e for e in it if e.is_dir() and not e.name.startswith(".")),
                key=lambda e: e.name,
            )
    except (FileNotFoundError, NotADirectoryError) as e:
        raise DocumentationNotFoundError("Documentation folder not found", str(root)) from e

    catalog: List[CatalogEntry] = []
    for domain_dir in domain_dirs:
        topics = [_topic_from_id(topic_id) for _, topic_id in iter_documentation_files(Path(domain_dir.path))]
        catalog.append(
            CatalogEntry(
                id=domain_dir.name,
                name=format_domain_name(domain_dir.name),
                topics=topics,
            )
        )

    logger.info("Catalog scanned", root=str(root), domains=len(catalog))
    return catalog


async def get_catalog(root: Path) -> List[CatalogEntry]:
    """Run the filesystem scan in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: scan_catalog(root))
