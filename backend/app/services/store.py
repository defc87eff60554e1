"""Append-only record stores: JSON files on disk, or a Supabase table for collections."""

import asyncio
import json
import threading
from pathlib import Path
from typing import Callable, Dict, Generic, List, Tuple, Type, TypeVar

from pydantic import BaseModel
from supabase import Client, create_client

from app.config import Settings
from app.schemas.responses import Collection, PerformanceRecord, User
from app.utils.logging_config import get_logger

logger = get_logger("store")

T = TypeVar("T", bound=BaseModel)

# One lock per backing file, shared by every store instance pointing at it.
_file_locks: Dict[Path, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _file_locks_guard:
        if key not in _file_locks:
            _file_locks[key] = threading.Lock()
        return _file_locks[key]


class JsonFileStore(Generic[T]):
    """
    List of records kept in a single JSON file.
    save() is a read-all / append / write-all cycle serialized by a per-file lock.
    """

    def __init__(self, path: Path, model: Type[T]):
        self.path = Path(path)
        self.model = model

    def _read_unlocked(self) -> List[T]:
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            raw = json.load(f)
        return [self.model.model_validate(item) for item in raw]

    def _write_unlocked(self, items: List[T]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [i.model_dump(mode="json", by_alias=True, exclude_none=True) for i in items]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.path)

    def get_all_sync(self) -> List[T]:
        with _lock_for(self.path):
            return self._read_unlocked()

    def save_sync(self, item: T) -> T:
        with _lock_for(self.path):
            items = self._read_unlocked()
            items.append(item)
            self._write_unlocked(items)
        return item

    def find_or_save_sync(self, match: Callable[[T], bool], item: T) -> Tuple[T, bool]:
        """Return (existing, False) for the first record matching, else append item and return (item, True)."""
        with _lock_for(self.path):
            items = self._read_unlocked()
            for existing in items:
                if match(existing):
                    return existing, False
            items.append(item)
            self._write_unlocked(items)
        return item, True

    async def get_all(self) -> List[T]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_all_sync)

    async def save(self, item: T) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.save_sync(item))

    async def find_or_save(self, match: Callable[[T], bool], item: T) -> Tuple[T, bool]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.find_or_save_sync(match, item))


def get_supabase_client(settings: Settings) -> Client:
    """Create Supabase client. No proxy or custom httpx passed."""
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError("Supabase URL and service key must be configured")
    try:
        return create_client(settings.supabase_url, settings.supabase_service_key)
    except TypeError as e:
        if "proxy" in str(e).lower() or "proxies" in str(e).lower():
            logger.exception("Supabase client creation failed", error=str(e))
            raise ValueError(
                "Supabase/httpx version conflict. Install: pip install 'supabase>=2.10' 'httpx>=0.26,<0.28'"
            ) from e
        raise


class SupabaseCollectionStore:
    """Collections kept as rows of a Supabase table; each insert is atomic on the server."""

    def __init__(self, client: Client, table: str = "collections"):
        self.client = client
        self.table = table

    async def get_all(self) -> List[Collection]:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            lambda: self.client.table(self.table).select("*").execute(),
        )
        return [Collection.model_validate(row) for row in (result.data or [])]

    async def save(self, item: Collection) -> Collection:
        row = item.model_dump(mode="json", by_alias=True, exclude_none=True)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, lambda: self.client.table(self.table).insert(row).execute())
        logger.info("Collection stored in Supabase", collection_id=item.id, table=self.table)
        return item


def build_collection_store(settings: Settings):
    """File store by default; Supabase when collection_backend="supabase"."""
    backend = (settings.collection_backend or "file").strip().lower()
    if backend == "supabase":
        return SupabaseCollectionStore(get_supabase_client(settings))
    if backend != "file":
        raise ValueError(f"Unknown collection backend: {backend}")
    return JsonFileStore(Path(settings.data_dir) / "collections.json", Collection)


def build_user_store(settings: Settings) -> JsonFileStore[User]:
    return JsonFileStore(Path(settings.data_dir) / "users.json", User)


def build_performance_store(settings: Settings) -> JsonFileStore[PerformanceRecord]:
    return JsonFileStore(Path(settings.data_dir) / "performance.json", PerformanceRecord)
