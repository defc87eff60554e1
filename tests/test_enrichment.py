from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from app.schemas.responses import Collection, User
from app.services.ai_service import mock_questions
from app.services.enrichment import build_tags, enrich_and_store
from app.services.store import JsonFileStore
from conftest import USE_STATE

USER = User(id="user-1", email="a@example.com", name="A", google_id="g-1")


class RecordingStore:
    def __init__(self) -> None:
        self.saved: list[Collection] = []

    async def save(self, item: Collection) -> Collection:
        self.saved.append(item)
        return item


class FailingStore:
    async def save(self, item: Collection) -> Collection:
        raise OSError("disk full")


@pytest.mark.parametrize(
    ("domain_id", "topic_id", "expected"),
    [
        ("react19", "hooks/useState", ["react19", "hooks", "useState"]),
        ("postgres", "Joins", ["postgres", "Joins"]),
        ("react19", "hooks//useState/", ["react19", "hooks", "useState"]),
    ],
)
def test_build_tags(domain_id: str, topic_id: str, expected: list[str]):
    assert build_tags(domain_id, topic_id) == expected


def test_tags_and_default_collection_name_applied_uniformly():
    questions = mock_questions(USE_STATE, "beginner", 3)

    enriched = asyncio.run(enrich_and_store(questions, "react19", "hooks/useState"))

    assert [q.tags for q in enriched] == [["react19", "hooks", "useState"]] * 3
    assert {q.collection_name for q in enriched} == {"Auto Generated"}
    assert [q.id for q in enriched] == [q.id for q in questions]


def test_named_collection_for_user_is_saved():
    store = RecordingStore()
    questions = mock_questions(USE_STATE, "beginner", 2)

    enriched = asyncio.run(
        enrich_and_store(questions, "react19", "hooks/useState", "Hooks drill", user=USER, store=store)
    )

    [collection] = store.saved
    assert collection.name == "Hooks drill"
    assert collection.owner_id == "user-1"
    assert collection.tags == ["react19", "hooks", "useState"]
    assert collection.questions == enriched
    assert {q.collection_name for q in enriched} == {"Hooks drill"}


@pytest.mark.parametrize(("name", "user"), [(None, USER), ("Hooks drill", None), ("", USER)])
def test_collection_not_saved_without_name_and_user(name, user):
    store = RecordingStore()
    asyncio.run(enrich_and_store(mock_questions(USE_STATE, "beginner", 1), "react19", "hooks/useState", name, user, store))
    assert store.saved == []


def test_save_failure_still_returns_questions():
    questions = mock_questions(USE_STATE, "beginner", 2)

    enriched = asyncio.run(
        enrich_and_store(questions, "react19", "hooks/useState", "Hooks drill", user=USER, store=FailingStore())
    )

    assert len(enriched) == 2
    assert enriched[0].tags == ["react19", "hooks", "useState"]


def test_saved_collection_round_trips_through_json_store(tmp_path: Path):
    store = JsonFileStore(tmp_path / "collections.json", Collection)

    asyncio.run(
        enrich_and_store(mock_questions(USE_STATE, "beginner", 2), "react19", "hooks/useState", "Saved", USER, store)
    )

    [collection] = asyncio.run(store.get_all())
    assert collection.name == "Saved"
    assert len(collection.questions) == 2
    assert collection.questions[0].tags == ["react19", "hooks", "useState"]
