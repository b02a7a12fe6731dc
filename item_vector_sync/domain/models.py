from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Union

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Qdrant accepts unsigned integers or UUID strings as point ids.
PointId = Union[int, str]


def format_timestamp(value: Optional[datetime]) -> str:
    """Render a row timestamp as ``YYYY-MM-DD HH:MM:SS``; missing values become now."""
    return (value or datetime.now()).strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class Item:
    """A row of the relational ``items`` table.

    Fields:
        id: Primary key of the row; stored in point payloads as the back-reference.
        name: Display name (may be empty).
        description: Free text description (may be empty).
        created_at / updated_at: Row timestamps, if the store recorded them.
    """
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.strftime(TIMESTAMP_FORMAT) if self.created_at else None,
            "updated_at": self.updated_at.strftime(TIMESTAMP_FORMAT) if self.updated_at else None,
        }


@dataclass(frozen=True)
class Vector:
    """Embedding vector with explicit dimension.

    Fields:
        values: The numeric embedding.
        dim: Dimension; validated against the collection size before writes.
    """
    values: List[float]
    dim: int


@dataclass(frozen=True)
class Point:
    """A point to upsert into the vector store.

    Fields:
        id: Qdrant point ID (UUID string for new points, never the item's own id;
            existing points keep whatever id the store reports).
        vector: Embedding vector (default unnamed vector).
        payload: Item fields plus the ``original_id`` back-reference.
    """
    id: PointId
    vector: Vector
    payload: Dict[str, object]


@dataclass(frozen=True)
class QueryResult:
    """Vector search match returned by the store.

    Fields:
        id: Point ID.
        score: Similarity score (store-defined; higher is better for cosine).
        payload: Returned payload.
    """
    id: PointId
    score: float
    payload: Dict[str, object]

