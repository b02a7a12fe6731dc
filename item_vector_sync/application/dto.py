from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..domain.errors import ItemSyncError


@dataclass(frozen=True)
class EnsureCollectionRequest:
    collection: str
    dim: int
    distance: str = "Cosine"


@dataclass(frozen=True)
class ChatRequest:
    question: str
    history: List[Dict[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class RetrievalOutcome:
    """Context lookup result; a failed lookup degrades to no context.

    Fields:
        context: Payloads of the nearest points (empty when degraded).
        error: The absorbed failure, if any.
    """
    context: List[Dict[str, object]]
    error: Optional[ItemSyncError] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class ChatResponse:
    answer: str
    context: List[Dict[str, object]]
    messages: List[Dict[str, str]]
    degraded: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {"answer": self.answer, "context": self.context, "messages": self.messages}
