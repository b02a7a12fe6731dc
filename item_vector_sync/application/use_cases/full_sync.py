from __future__ import annotations

from typing import List

from ..points import build_point, item_text
from ...domain.errors import EmbeddingError
from ...domain.interfaces import EmbeddingService, ItemRepository, VectorStore
from ...domain.models import Point
from ...infrastructure.config import Settings
from ...infrastructure.logging import get_logger

logger = get_logger("item_vector_sync.sync")


class FullSyncUseCase:
    """Use-case: embed every item in one batch call and bulk-upsert the points."""

    def __init__(self, items: ItemRepository, embeddings: EmbeddingService, store: VectorStore, settings: Settings) -> None:
        self._items = items
        self._emb = embeddings
        self._store = store
        self._settings = settings

    def execute(self) -> int:
        items = self._items.all()
        if not items:
            logger.info("No items to sync.")
            return 0

        vecs = self._emb.embed_texts([item_text(it) for it in items])

        dim = self._settings.vector_size
        points: List[Point] = []
        for index, item in enumerate(items):
            vec = vecs[index] if index < len(vecs) else None
            if vec is None or len(vec.values) != dim:
                got = len(vec.values) if vec is not None else None
                logger.error("Invalid embedding for item %s | expected=%d | got=%s", item.id, dim, got)
                continue
            points.append(build_point(item, vec, self._emb.model))

        if not points:
            raise EmbeddingError("No valid points to sync.")

        self._store.upsert_points(self._settings.collection, points)
        logger.info("Full sync completed | collection=%s | points=%d | skipped=%d",
                    self._settings.collection, len(points), len(items) - len(points))
        return len(points)
