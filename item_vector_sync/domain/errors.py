from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONFIG = "config"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    COLLECTION = "collection"
    EMBEDDING = "embedding"
    DIMENSION = "dimension"
    VECTOR_STORE = "vector_store"
    CHAT = "chat"
    NOT_FOUND = "not_found"
    ITEM_STORE = "item_store"


class ItemSyncError(RuntimeError):
    """Base failure for sync and chat operations.

    Carries the failure kind and, when an upstream service answered, the raw
    response body so callers can surface it.
    """

    kind: ErrorKind = ErrorKind.VECTOR_STORE

    def __init__(self, message: str, upstream_body: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.upstream_body = upstream_body

    def __str__(self) -> str:
        if self.upstream_body:
            return f"{self.message}: {self.upstream_body}"
        return self.message


class ConfigError(ItemSyncError, ValueError):
    """Raised when required configuration is missing or invalid."""

    kind = ErrorKind.CONFIG


class UpstreamUnavailableError(ItemSyncError):
    """Raised when the vector store does not report ready."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class CollectionError(ItemSyncError):
    """Raised when the collection cannot be checked or created."""

    kind = ErrorKind.COLLECTION


class EmbeddingError(ItemSyncError):
    """Raised when embedding provider fails."""

    kind = ErrorKind.EMBEDDING


class DimensionMismatchError(EmbeddingError):
    """Raised when an embedding does not match the collection dimension."""

    kind = ErrorKind.DIMENSION


class VectorStoreError(ItemSyncError):
    """Raised when vector store provider fails."""

    kind = ErrorKind.VECTOR_STORE


class ChatCompletionError(ItemSyncError):
    """Raised when the chat-completion provider fails."""

    kind = ErrorKind.CHAT


class ItemNotFoundError(ItemSyncError, LookupError):
    """Raised when the relational store has no row for the requested id."""

    kind = ErrorKind.NOT_FOUND


class ItemStoreError(ItemSyncError):
    """Raised when the relational item store cannot be opened or read."""

    kind = ErrorKind.ITEM_STORE
