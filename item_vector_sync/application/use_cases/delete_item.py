from __future__ import annotations

from typing import List, Optional

from ..points import BACK_REFERENCE_KEY
from ...domain.interfaces import VectorStore
from ...domain.models import PointId
from ...infrastructure.config import Settings
from ...infrastructure.logging import get_logger

logger = get_logger("item_vector_sync.sync")

SCROLL_PAGE_SIZE = 100


class DeleteItemUseCase:
    """Use-case: remove every point whose back-reference names the item."""

    def __init__(self, store: VectorStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings

    def _matching_ids(self, item_id: int) -> List[PointId]:
        ids: List[PointId] = []
        offset: Optional[object] = None
        while True:
            page, offset = self._store.scroll_by_payload(
                self._settings.collection,
                BACK_REFERENCE_KEY,
                item_id,
                limit=SCROLL_PAGE_SIZE,
                with_payload=False,
                offset=offset,
            )
            ids.extend(p.id for p in page)
            if offset is None or not page:
                return ids

    def execute(self, item_id: int) -> int:
        ids = self._matching_ids(item_id)
        if not ids:
            logger.debug("No Qdrant point found for item ID %s", item_id)
            return 0
        self._store.delete_points(self._settings.collection, ids)
        logger.debug("Deleted point(s) %s for item %s", ", ".join(str(i) for i in ids), item_id)
        return len(ids)
