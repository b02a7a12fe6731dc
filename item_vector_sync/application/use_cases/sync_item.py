from __future__ import annotations

from typing import Optional

from ..points import build_point, item_text
from ...domain.interfaces import EmbeddingService, VectorStore
from ...domain.models import Item, Point, PointId
from ...infrastructure.config import Settings


class SyncItemUseCase:
    """Use-case: embed one item and upsert it as a single point."""

    def __init__(self, embeddings: EmbeddingService, store: VectorStore, settings: Settings) -> None:
        self._emb = embeddings
        self._store = store
        self._settings = settings

    def prepare(self, item: Item, point_id: Optional[PointId] = None) -> Point:
        vec = self._emb.embed_text(item_text(item))
        return build_point(item, vec, self._emb.model, point_id=point_id)

    def execute(self, item: Item, point_id: Optional[PointId] = None) -> Point:
        """Upsert ``item``; a fresh UUID is generated unless ``point_id`` is given."""
        point = self.prepare(item, point_id)
        self._store.upsert_points(self._settings.collection, [point])
        return point
