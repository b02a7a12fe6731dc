from __future__ import annotations

from .dto import EnsureCollectionRequest
from .use_cases.delete_item import DeleteItemUseCase
from .use_cases.ensure_collection import EnsureCollectionUseCase
from .use_cases.full_sync import FullSyncUseCase
from .use_cases.sync_item import SyncItemUseCase
from .use_cases.update_item import UpdateItemUseCase
from ..domain.errors import ItemNotFoundError, ItemSyncError
from ..domain.interfaces import EmbeddingService, ItemRepository, VectorStore
from ..domain.models import Item
from ..infrastructure.config import Settings
from ..infrastructure.logging import get_logger

logger = get_logger("item_vector_sync.sync")


class ItemSynchronizer:
    """Keeps the Qdrant collection in step with the relational ``items`` table.

    The store is checked for readiness once, at construction. Every operation
    logs its failure with the item id and re-raises it unchanged.
    """

    def __init__(
        self,
        settings: Settings,
        items: ItemRepository,
        embeddings: EmbeddingService,
        store: VectorStore,
    ) -> None:
        self._settings = settings
        self._items = items
        self._emb = embeddings
        self._store = store
        store.check_ready()

    def ensure_collection(self) -> bool:
        return EnsureCollectionUseCase(self._store).execute(
            EnsureCollectionRequest(
                collection=self._settings.collection,
                dim=self._settings.vector_size,
                distance=self._settings.distance,
            )
        )

    def full_sync(self) -> int:
        """Embed and upsert every item; returns the number of points written."""
        try:
            self.ensure_collection()
            return FullSyncUseCase(self._items, self._emb, self._store, self._settings).execute()
        except ItemSyncError as ex:
            logger.error("ItemSync fullSync failed: %s", ex)
            raise

    def sync_item(self, item: Item) -> bool:
        try:
            self.ensure_collection()
            SyncItemUseCase(self._emb, self._store, self._settings).execute(item)
            return True
        except ItemSyncError as ex:
            logger.error("ItemSync syncSingle failed for item %s: %s", item.id, ex)
            raise

    def update_item(self, item: Item) -> bool:
        try:
            self.ensure_collection()
            UpdateItemUseCase(self._emb, self._store, self._settings).execute(item)
            return True
        except ItemSyncError as ex:
            logger.error("ItemSync updateSingle failed for item %s: %s", item.id, ex)
            raise

    def delete_item(self, item_id: int) -> int:
        """Delete the item's points; an item with no points is a no-op returning 0."""
        try:
            return DeleteItemUseCase(self._store, self._settings).execute(item_id)
        except ItemSyncError as ex:
            logger.error("Delete failed for item %s: %s", item_id, ex)
            raise

    def _load(self, item_id: int) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(f"Item {item_id} not found")
        return item

    def sync_item_by_id(self, item_id: int) -> bool:
        return self.sync_item(self._load(item_id))

    def update_item_by_id(self, item_id: int) -> bool:
        return self.update_item(self._load(item_id))
