from __future__ import annotations

from ..dto import EnsureCollectionRequest
from ...domain.interfaces import VectorStore


class EnsureCollectionUseCase:
    """Use-case: create the collection on first access if it is absent."""

    def __init__(self, store: VectorStore) -> None:
        self._store = store

    def execute(self, req: EnsureCollectionRequest) -> bool:
        """
        Ensures that the named collection exists with the configured dimension and distance metric.

        A "not found" answer creates it; any other failure from the store propagates.

        Args:
            req: The request object containing collection name, dimension and distance.

        Returns:
            bool: True when the collection was created by this call.
        """
        return self._store.ensure_collection(req.collection, int(req.dim), req.distance)
