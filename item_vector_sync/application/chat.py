from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .dto import ChatRequest, ChatResponse, RetrievalOutcome
from .prompts import build_messages
from .use_cases.retrieve_context import RetrieveContextUseCase
from ..domain.interfaces import ChatService, EmbeddingService, VectorStore
from ..infrastructure.config import Settings
from ..infrastructure.logging import get_logger

logger = get_logger("item_vector_sync.chat")

TEMPERATURE = 0.7
MAX_TOKENS = 500


class ItemChatService:
    """Answers questions about items using the nearest stored items as context.

    Stateless: conversation history is supplied by the caller on every call.
    """

    def __init__(
        self,
        settings: Settings,
        embeddings: EmbeddingService,
        chat: ChatService,
        store: VectorStore,
    ) -> None:
        self._settings = settings
        self._chat = chat
        self._retriever = RetrieveContextUseCase(embeddings, store, settings)

    def retrieve_context(self, question: str) -> RetrievalOutcome:
        return self._retriever.execute(question)

    def build_messages(
        self,
        question: str,
        context: Sequence[Dict[str, object]],
        history: Sequence[Dict[str, str]] = (),
    ) -> List[Dict[str, str]]:
        return build_messages(question, context, history)

    def complete(self, messages: List[Dict[str, str]]) -> str:
        return self._chat.complete(messages, temperature=TEMPERATURE, max_tokens=MAX_TOKENS)

    def chat(self, question: str, history: Optional[Sequence[Dict[str, str]]] = None) -> ChatResponse:
        return self.execute(ChatRequest(question=question, history=list(history or [])))

    def execute(self, req: ChatRequest) -> ChatResponse:
        outcome = self.retrieve_context(req.question)
        if outcome.degraded:
            logger.info("Answering without context | question=%s", req.question[:50])
        messages = self.build_messages(req.question, outcome.context, req.history)
        answer = self.complete(messages)
        return ChatResponse(
            answer=answer,
            context=outcome.context,
            messages=messages,
            degraded=outcome.degraded,
        )
