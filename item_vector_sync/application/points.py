from __future__ import annotations

import json
import uuid
from typing import Dict, Optional

from ..domain.models import Item, Point, PointId, Vector, format_timestamp

# Payload key linking a point back to its relational row.
BACK_REFERENCE_KEY = "original_id"
EMBED_MODEL_KEY = "embed_model"


def item_text(item: Item) -> str:
    """Text sent for embedding: name and description joined by a space.

    When both are empty the whole row is serialized instead, so the provider
    never receives an empty string.
    """
    text = " ".join(p for p in (item.name, item.description) if p)
    return text or json.dumps(item.to_dict())


def new_point_id() -> str:
    return str(uuid.uuid4())


def build_point(item: Item, vector: Vector, embed_model: str, point_id: Optional[PointId] = None) -> Point:
    payload: Dict[str, object] = {
        BACK_REFERENCE_KEY: item.id,
        "name": item.name or "",
        "description": item.description or "",
        "created_at": format_timestamp(item.created_at),
        "updated_at": format_timestamp(item.updated_at),
        EMBED_MODEL_KEY: embed_model,
    }
    return Point(id=new_point_id() if point_id is None else point_id, vector=vector, payload=payload)
