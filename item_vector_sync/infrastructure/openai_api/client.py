from __future__ import annotations

from typing import Dict, List, Optional

from openai import OpenAI, OpenAIError

from ...domain.errors import ChatCompletionError, ConfigError, DimensionMismatchError, EmbeddingError
from ...domain.interfaces import ChatService, EmbeddingService
from ...domain.models import Vector
from ..config import Settings
from ..logging import get_logger

logger = get_logger("item_vector_sync.openai")


def build_client(settings: Settings) -> OpenAI:
    if not settings.api_key:
        raise ConfigError("Missing OPENAI_API_KEY")
    return OpenAI(api_key=settings.api_key)


class OpenAIEmbeddingService(EmbeddingService):
    """Embedding adapter for OpenAI ``embeddings.create``.

    One instance pins one model; the synchronizer and the chat helper share
    it so stored and query vectors always come from the same model.
    """

    def __init__(self, client: OpenAI, model: str, dim: int) -> None:
        self._client = client
        self.model = model
        self.dim = dim

    def embed_text(self, text: str) -> Vector:
        logger.debug("Generating embedding for text: %s...", text[:50])
        try:
            response = self._client.embeddings.create(model=self.model, input=text)
        except OpenAIError as ex:
            logger.error("Failed to embed text: %s", ex)
            raise EmbeddingError(f"Embedding request failed: {ex}") from ex
        if not response.data:
            raise EmbeddingError("Embedding response contained no vectors")
        values = [float(x) for x in response.data[0].embedding]
        logger.debug("Embedding generated. Length: %d", len(values))
        if len(values) != self.dim:
            logger.error("Invalid embedding size: expected %d, got %d", self.dim, len(values))
            raise DimensionMismatchError(f"Invalid embedding size: expected {self.dim}, got {len(values)}")
        return Vector(values=values, dim=len(values))

    def embed_texts(self, texts: List[str]) -> List[Vector]:
        if not texts:
            raise EmbeddingError("No valid texts provided for embedding")
        try:
            response = self._client.embeddings.create(model=self.model, input=list(texts))
        except OpenAIError as ex:
            logger.error("Failed to embed text batch: %s", ex)
            raise EmbeddingError(f"Batch embedding request failed: {ex}") from ex
        # The provider tags every entry with its input index; order by it.
        data = sorted(response.data, key=lambda d: d.index)
        out: List[Vector] = []
        for d in data:
            values = [float(x) for x in d.embedding]
            out.append(Vector(values=values, dim=len(values)))
        logger.debug("Batch embeddings generated: %d vectors", len(out))
        return out


class OpenAIChatService(ChatService):
    """Chat-completion adapter for OpenAI ``chat.completions.create``."""

    def __init__(self, client: OpenAI, model: str) -> None:
        self._client = client
        self.model = model

    def complete(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> str:
        try:
            cc = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as ex:
            logger.error("Chat completion failed | model=%s | error=%s", self.model, ex)
            raise ChatCompletionError(f"Chat completion failed: {ex}") from ex
        if not cc.choices:
            raise ChatCompletionError("Chat completion returned no choices")
        content: Optional[str] = cc.choices[0].message.content
        return content or ""
