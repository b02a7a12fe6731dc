from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Item, Point, PointId, QueryResult, Vector


class EmbeddingService(ABC):
    """Port for embedding provider (e.g., OpenAI)."""

    model: str

    @abstractmethod
    def embed_text(self, text: str) -> Vector:
        """Embed a single text; raises when the provider fails."""
        raise NotImplementedError

    @abstractmethod
    def embed_texts(self, texts: List[str]) -> List[Vector]:
        """Embed a batch of texts in one provider call.

        The result is positionally aligned with ``texts``. Dimensions are not
        validated here; callers decide whether a bad entry is fatal.
        """
        raise NotImplementedError


class ChatService(ABC):
    """Port for chat-completion provider."""

    @abstractmethod
    def complete(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> str:
        """Return the text of the first completion choice."""
        raise NotImplementedError


class VectorStore(ABC):
    """Port for vector storage (e.g., Qdrant)."""

    @abstractmethod
    def check_ready(self) -> None:
        """Raise if the store is not ready to serve requests."""
        raise NotImplementedError

    @abstractmethod
    def ensure_collection(self, name: str, dim: int, distance: str = "Cosine") -> bool:
        """Create the collection when absent; returns True when it was created."""
        raise NotImplementedError

    @abstractmethod
    def upsert_points(self, name: str, points: List[Point]) -> dict:
        """Upsert list of points; returns provider response JSON."""
        raise NotImplementedError

    @abstractmethod
    def scroll_by_payload(
        self,
        name: str,
        key: str,
        value: object,
        limit: int = 1,
        with_payload: bool = False,
        offset: Optional[object] = None,
    ) -> Tuple[List[QueryResult], Optional[object]]:
        """Return points whose payload ``key`` equals ``value`` plus the next page offset."""
        raise NotImplementedError

    @abstractmethod
    def delete_points(self, name: str, ids: Sequence[PointId]) -> dict:
        """Delete points by store-assigned id."""
        raise NotImplementedError

    @abstractmethod
    def search(
        self,
        name: str,
        vector: Vector,
        limit: int = 5,
        with_payload: bool = True,
        match: Optional[Dict[str, object]] = None,
    ) -> List[QueryResult]:
        """Search similar points, optionally restricted to payload equality ``match``."""
        raise NotImplementedError


class ItemRepository(ABC):
    """Port for the relational item table (read-only)."""

    @abstractmethod
    def all(self) -> List[Item]:
        raise NotImplementedError

    @abstractmethod
    def get(self, item_id: int) -> Optional[Item]:
        raise NotImplementedError
