from __future__ import annotations

import asyncio
import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from app.config import Settings
from app.schemas.responses import Collection, PerformanceRecord, User
from app.services import store as store_module
from app.services.store import JsonFileStore, SupabaseCollectionStore, build_collection_store


def _user(i: int) -> User:
    return User(id=f"user-{i}", email=f"{i}@example.com", google_id=f"g-{i}")


def test_missing_file_reads_as_empty(tmp_path: Path):
    assert JsonFileStore(tmp_path / "users.json", User).get_all_sync() == []


def test_save_appends_with_camel_case_keys(tmp_path: Path):
    path = tmp_path / "nested" / "users.json"
    store = JsonFileStore(path, User)

    store.save_sync(_user(1))
    store.save_sync(_user(2))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert [item["googleId"] for item in raw] == ["g-1", "g-2"]
    assert [u.id for u in store.get_all_sync()] == ["user-1", "user-2"]


def test_concurrent_saves_do_not_lose_updates(tmp_path: Path):
    path = tmp_path / "users.json"

    with ThreadPoolExecutor(max_workers=8) as pool:
        # Separate store instances on the same file share the file lock.
        list(pool.map(lambda i: JsonFileStore(path, User).save_sync(_user(i)), range(40)))

    ids = {u.id for u in JsonFileStore(path, User).get_all_sync()}
    assert ids == {f"user-{i}" for i in range(40)}


def test_find_or_save_appends_once_under_contention(tmp_path: Path):
    path = tmp_path / "users.json"
    candidate = _user(7)

    def login(_):
        return JsonFileStore(path, User).find_or_save_sync(lambda u: u.google_id == "g-7", candidate)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(login, range(20)))

    assert sum(created for _, created in results) == 1
    assert {user.id for user, _ in results} == {"user-7"}
    assert len(JsonFileStore(path, User).get_all_sync()) == 1


def test_async_api(tmp_path: Path):
    store = JsonFileStore(tmp_path / "performance.json", PerformanceRecord)
    record = PerformanceRecord(
        id="p1", user_id="u1", collection_id="c1", score=3, total_questions=4, answers=[0, 1, 2, 3], date="2026-01-01"
    )

    async def scenario():
        await asyncio.gather(store.save(record), store.save(record.model_copy(update={"id": "p2"})))
        return await store.get_all()

    assert sorted(p.id for p in asyncio.run(scenario())) == ["p1", "p2"]


def test_collection_accepts_legacy_user_id_key(tmp_path: Path):
    path = tmp_path / "collections.json"
    path.write_text(
        json.dumps([{"id": "c1", "name": "Old", "userId": "u1", "questions": [], "createdAt": "2025-01-01T00:00:00Z"}]),
        encoding="utf-8",
    )

    [collection] = JsonFileStore(path, Collection).get_all_sync()
    assert collection.owner_id == "u1"


def test_build_collection_store_defaults_to_file(tmp_path: Path):
    store = build_collection_store(Settings(_env_file=None, data_dir=str(tmp_path)))
    assert isinstance(store, JsonFileStore)
    assert store.path == tmp_path / "collections.json"


def test_build_collection_store_supabase_requires_credentials():
    with pytest.raises(ValueError, match="Supabase URL"):
        build_collection_store(Settings(_env_file=None, collection_backend="supabase", supabase_url=""))


def test_supabase_proxy_conflict_is_reported_as_version_conflict(monkeypatch):
    def create_client(url, key):
        raise TypeError("Client.__init__() got an unexpected keyword argument 'proxy'")

    monkeypatch.setattr(store_module, "create_client", create_client)
    configured = Settings(_env_file=None, supabase_url="https://x.supabase.co", supabase_service_key="key")

    with pytest.raises(ValueError, match="version conflict"):
        store_module.get_supabase_client(configured)


def test_supabase_store_inserts_camel_case_rows():
    class FakeQuery:
        def __init__(self, client, table):
            self.client, self.table = client, table

        def insert(self, row):
            self.client.rows.append(row)
            return self

        def select(self, columns):
            return self

        def execute(self):
            return type("Result", (), {"data": list(self.client.rows)})()

    class FakeClient:
        def __init__(self):
            self.rows = []

        def table(self, name):
            return FakeQuery(self, name)

    client = FakeClient()
    store = SupabaseCollectionStore(client)
    collection = Collection(id="c1", name="Deck", owner_id="u1", questions=[], created_at="2026-01-01T00:00:00Z")

    asyncio.run(store.save(collection))

    assert client.rows[0]["ownerId"] == "u1"
    assert asyncio.run(store.get_all()) == [collection]
