from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from fastapi.testclient import TestClient
import pytest

from app.config import Settings, get_settings
from app.main import create_app

USE_STATE = {
    "name": "useState",
    "meta": {
        "title": "useState Hook",
        "description": "Adds a state variable to a function component",
    },
    "taxonomy": {"category": "hooks"},
    "mental_model": {"summary": "State is a snapshot that triggers a re-render when set."},
    "usage_patterns": [{"pattern": "const [count, setCount] = useState(0)"}],
    "common_pitfalls": ["Reading state right after setting it returns the old value"],
    "best_practices": ["Use the updater form when the next state depends on the previous one"],
}

USE_EFFECT = {
    "name": "useEffect",
    "meta": {"title": "useEffect Hook", "description": "Synchronizes a component with an external system"},
    "taxonomy": {"category": "hooks"},
}

OVERVIEW = {
    "name": "overview",
    "meta": {"title": "React 19 Overview", "description": "What changed in React 19"},
}


def write_doc(root: Path, relative: str, record: dict[str, Any]) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(record), encoding="utf-8")
    return path


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    root = tmp_path / "documentation"
    write_doc(root, "react19/hooks/useState.json", USE_STATE)
    write_doc(root, "react19/hooks/useEffect.json", USE_EFFECT)
    write_doc(root, "react19/overview.json", OVERVIEW)
    write_doc(root, "postgres/Indexing.json", {"name": "Indexing", "meta": {"title": "Indexing", "description": "B-tree and friends"}})
    write_doc(root, "postgres/Joins.json", {"name": "Joins", "meta": {"title": "Joins", "description": "Combining rows"}})
    (root / ".git").mkdir()
    (root / "react19" / "notes.md").write_text("not a record", encoding="utf-8")
    return root


@pytest.fixture
def settings(tmp_path: Path, docs_root: Path) -> Settings:
    return Settings(
        _env_file=None,
        documentation_root=str(docs_root),
        data_dir=str(tmp_path / "data"),
        ai_provider="mock",
        anthropic_api_key="",
        openai_api_key="",
        gemini_api_key="",
        google_client_id="",
    )


@pytest.fixture
def app(settings: Settings):
    application = create_app()
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def demo_headers() -> dict[str, str]:
    return {"Authorization": "Bearer DEMO_TOKEN"}
