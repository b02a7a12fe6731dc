from __future__ import annotations

from ..points import BACK_REFERENCE_KEY
from .sync_item import SyncItemUseCase
from ...domain.interfaces import EmbeddingService, VectorStore
from ...domain.models import Item, Point
from ...infrastructure.config import Settings
from ...infrastructure.logging import get_logger

logger = get_logger("item_vector_sync.sync")


class UpdateItemUseCase:
    """Use-case: re-embed an item in place, reusing the id of its existing point.

    An item with no point yet is synced as new.
    """

    def __init__(self, embeddings: EmbeddingService, store: VectorStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings
        self._sync = SyncItemUseCase(embeddings, store, settings)

    def execute(self, item: Item) -> Point:
        matches, _ = self._store.scroll_by_payload(
            self._settings.collection,
            BACK_REFERENCE_KEY,
            item.id,
            limit=1,
            with_payload=True,
        )
        if not matches:
            logger.info("No existing Qdrant point found for item %s, performing sync instead", item.id)
            return self._sync.execute(item)

        existing_id = matches[0].id
        point = self._sync.execute(item, point_id=existing_id)
        logger.info("Updated Qdrant point %s for item %s", existing_id, item.id)
        return point
