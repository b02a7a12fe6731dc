"""
Pytest configuration and fixtures for item vector sync tests.

Provides settings, mocked providers, an in-memory vector store and a
temporary SQLite items database.
"""

import sqlite3
from datetime import datetime
from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest

from item_vector_sync.domain.interfaces import VectorStore
from item_vector_sync.domain.models import Item, QueryResult, Vector
from item_vector_sync.infrastructure.config import Settings

DIM = 1536
EMBED_MODEL = "text-embedding-ada-002"


def make_vector(dim: int = DIM, value: float = 0.1) -> Vector:
    return Vector(values=[value] * dim, dim=dim)


def make_response(status: int = 200, payload: Optional[dict] = None, text: str = "") -> Mock:
    """Mock of a ``requests.Response`` with the attributes the Qdrant adapter reads."""
    resp = Mock()
    resp.status_code = status
    resp.ok = status < 400
    resp.text = text
    resp.json.return_value = payload if payload is not None else {"status": "ok", "result": {}}
    return resp


class InMemoryVectorStore(VectorStore):
    """Dict-backed store honoring the port contract, for round-trip tests."""

    def __init__(self) -> None:
        self.collections: Dict[str, Dict[str, dict]] = {}
        self.delete_calls: List[List[str]] = []

    def check_ready(self) -> None:
        return None

    def ensure_collection(self, name, dim, distance="Cosine"):
        if name in self.collections:
            return False
        self.collections[name] = {}
        return True

    def upsert_points(self, name, points):
        for p in points:
            self.collections[name][p.id] = {"vector": p.vector, "payload": dict(p.payload)}
        return {"status": "ok"}

    def scroll_by_payload(self, name, key, value, limit=1, with_payload=False, offset=None):
        matches = [
            QueryResult(id=pid, score=0.0, payload=rec["payload"] if with_payload else {})
            for pid, rec in self.collections.get(name, {}).items()
            if rec["payload"].get(key) == value
        ]
        start = int(offset or 0)
        page = matches[start:start + limit]
        nxt = start + limit if start + limit < len(matches) else None
        return page, nxt

    def delete_points(self, name, ids):
        self.delete_calls.append(list(ids))
        for pid in ids:
            self.collections[name].pop(pid, None)
        return {"status": "ok"}

    def search(self, name, vector, limit=5, with_payload=True, match=None):
        out = []
        for pid, rec in self.collections.get(name, {}).items():
            if match and any(rec["payload"].get(k) != v for k, v in match.items()):
                continue
            out.append(QueryResult(id=pid, score=1.0, payload=rec["payload"]))
        return out[:limit]


@pytest.fixture
def settings():
    """Settings pointing at a test collection with the default 1536 dimension."""
    return Settings(collection="items_test", api_key="sk-test", embed_model=EMBED_MODEL)


@pytest.fixture
def mock_embedding_service():
    """Mock embedding service for testing."""
    mock = Mock()
    mock.model = EMBED_MODEL
    mock.embed_text.return_value = make_vector()
    mock.embed_texts.side_effect = lambda texts: [make_vector() for _ in texts]
    return mock


@pytest.fixture
def mock_vector_store():
    """Mock vector store for testing."""
    mock = Mock()
    mock.check_ready.return_value = None
    mock.ensure_collection.return_value = False
    mock.upsert_points.return_value = {"status": "ok"}
    mock.scroll_by_payload.return_value = ([], None)
    mock.delete_points.return_value = {"status": "ok"}
    mock.search.return_value = []
    return mock


@pytest.fixture
def memory_store():
    return InMemoryVectorStore()


@pytest.fixture
def sample_items():
    return [
        Item(id=1, name="Lamp", description="Brass desk lamp",
             created_at=datetime(2024, 1, 2, 3, 4, 5), updated_at=datetime(2024, 2, 3, 4, 5, 6)),
        Item(id=2, name="Chair", description=None),
        Item(id=3, name="", description="Oak table"),
    ]


@pytest.fixture
def mock_item_repository(sample_items):
    mock = Mock()
    mock.all.return_value = list(sample_items)
    mock.get.side_effect = lambda item_id: next((i for i in sample_items if i.id == item_id), None)
    return mock


@pytest.fixture
def items_db(tmp_path):
    """Temporary SQLite database with an ``items`` table and three rows."""
    path = tmp_path / "items.db"
    conn = sqlite3.connect(str(path))
    conn.execute(
        "CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT, description TEXT, "
        "created_at TEXT, updated_at TEXT)"
    )
    conn.executemany(
        "INSERT INTO items (id, name, description, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
        [
            (2, "Chair", "Folding chair", "2024-01-02 03:04:05", "2024-01-03 03:04:05"),
            (1, "Lamp", None, None, None),
            (3, None, None, "not-a-date", ""),
        ],
    )
    conn.commit()
    conn.close()
    return path
