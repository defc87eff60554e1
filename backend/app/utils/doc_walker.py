"""Depth-first walk over a domain's documentation files."""

import os
from pathlib import Path
from typing import Iterator, Tuple

from app.utils.logging_config import get_logger

logger = get_logger("doc_walker")

DOC_EXTENSION = ".json"
TOPIC_DELIMITER = "/"


def topic_id_for(domain_path: Path, file_path: Path) -> str:
    """
    Derive a topic id from a documentation file path.
    e.g. <domain>/hooks/useState.json -> "hooks/useState"
    """
    relative = file_path.relative_to(domain_path)
    parts = list(relative.parts)
    parts[-1] = parts[-1][: -len(DOC_EXTENSION)] if parts[-1].endswith(DOC_EXTENSION) else parts[-1]
    return TOPIC_DELIMITER.join(parts)


def iter_documentation_files(domain_path: Path) -> Iterator[Tuple[Path, str]]:
    """
    Yield (file_path, topic_id) for every documentation file under domain_path.
    Depth-first, sorted by name, hidden entries skipped. Each call restarts the walk.
    """
    yield from _walk(Path(domain_path), Path(domain_path))


def _walk(domain_path: Path, current: Path) -> Iterator[Tuple[Path, str]]:
    try:
        with os.scandir(current) as it:
            entries = sorted(it, key=lambda e: e.name)
    except (FileNotFoundError, NotADirectoryError):
        # Removed or replaced while the walk was running.
        logger.debug("Skipping vanished directory", path=str(current))
        return
    for entry in entries:
        if entry.name.startswith("."):
            continue
        path = Path(entry.path)
        if entry.is_dir():
            yield from _walk(domain_path, path)
        elif entry.is_file() and entry.name.endswith(DOC_EXTENSION):
            yield path, topic_id_for(domain_path, path)
