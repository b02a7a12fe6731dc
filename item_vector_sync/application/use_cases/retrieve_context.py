from __future__ import annotations

from ..dto import RetrievalOutcome
from ..points import EMBED_MODEL_KEY
from ...domain.errors import ItemSyncError
from ...domain.interfaces import EmbeddingService, VectorStore
from ...infrastructure.config import Settings
from ...infrastructure.logging import get_logger

logger = get_logger("item_vector_sync.chat")

CONTEXT_LIMIT = 5


class RetrieveContextUseCase:
    """Use-case: embed the question and fetch the payloads of the nearest items.

    Failures are absorbed: the outcome carries the error and an empty context.
    """

    def __init__(self, embeddings: EmbeddingService, store: VectorStore, settings: Settings) -> None:
        self._emb = embeddings
        self._store = store
        self._settings = settings

    def execute(self, question: str) -> RetrievalOutcome:
        try:
            vec = self._emb.embed_text(question)
            results = self._store.search(
                self._settings.collection,
                vec,
                limit=CONTEXT_LIMIT,
                with_payload=True,
                match={EMBED_MODEL_KEY: self._emb.model},
            )
        except ItemSyncError as ex:
            logger.error("Context retrieval failed | collection=%s | error=%s", self._settings.collection, ex)
            return RetrievalOutcome(context=[], error=ex)
        return RetrievalOutcome(context=[r.payload for r in results])
