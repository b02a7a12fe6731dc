"""
Unit tests for the retrieval chat helper: context lookup, prompt assembly
and the composed chat flow.
"""

import json
from unittest.mock import Mock, patch

import pytest

from conftest import EMBED_MODEL, make_response, make_vector
from item_vector_sync.application.chat import MAX_TOKENS, TEMPERATURE, ItemChatService
from item_vector_sync.application.prompts import build_messages, system_prompt
from item_vector_sync.domain.errors import ChatCompletionError, EmbeddingError, VectorStoreError
from item_vector_sync.domain.models import QueryResult
from item_vector_sync.infrastructure.qdrant.client import QdrantVectorStore


@pytest.fixture
def mock_chat_service():
    mock = Mock()
    mock.complete.return_value = "The brass lamp is in stock."
    return mock


@pytest.fixture
def chat_service(settings, mock_embedding_service, mock_chat_service, mock_vector_store):
    return ItemChatService(settings, mock_embedding_service, mock_chat_service, mock_vector_store)


class TestPromptAssembly:
    """Test system prompt and message ordering."""

    def test_system_prompt_embeds_context_json(self):
        context = [{"original_id": 1, "name": "Lamp"}]
        prompt = system_prompt(context)
        assert prompt.startswith("You are an intelligent assistant")
        assert json.dumps(context, indent=4) in prompt
        assert "Never make up information not in the provided data" in prompt

    def test_empty_context_renders_empty_list(self):
        assert "\n[]\n" in system_prompt([])

    def test_history_appended_verbatim_between_system_and_question(self):
        history = [
            {"role": "user", "content": "Do you sell lamps?"},
            {"role": "assistant", "content": "Yes."},
            {"role": "tool", "content": "unvalidated"},
        ]
        messages = build_messages("Which one is brass?", [], history)

        assert messages[0]["role"] == "system"
        assert messages[1:4] == history
        assert messages[-1] == {"role": "user", "content": "Which one is brass?"}
        assert len(messages) == 5


class TestContextRetrieval:
    """Test nearest-item lookup and its degrade-to-empty behaviour."""

    def test_returns_payloads(self, chat_service, mock_vector_store):
        mock_vector_store.search.return_value = [
            QueryResult(id="a", score=0.9, payload={"original_id": 1, "name": "Lamp"}),
            QueryResult(id="b", score=0.8, payload={"original_id": 2, "name": "Chair"}),
        ]
        outcome = chat_service.retrieve_context("lamp?")

        assert outcome.context == [{"original_id": 1, "name": "Lamp"}, {"original_id": 2, "name": "Chair"}]
        assert outcome.degraded is False

    def test_search_parameters(self, chat_service, mock_vector_store, mock_embedding_service):
        chat_service.retrieve_context("lamp?")

        mock_embedding_service.embed_text.assert_called_once_with("lamp?")
        _, kwargs = mock_vector_store.search.call_args
        assert kwargs["limit"] == 5
        assert kwargs["with_payload"] is True
        assert kwargs["match"] == {"embed_model": EMBED_MODEL}

    def test_search_failure_degrades(self, chat_service, mock_vector_store):
        mock_vector_store.search.side_effect = VectorStoreError("Qdrant search failed", "down")
        outcome = chat_service.retrieve_context("lamp?")

        assert outcome.context == []
        assert outcome.degraded is True
        assert isinstance(outcome.error, VectorStoreError)

    def test_embedding_failure_degrades(self, chat_service, mock_embedding_service, mock_vector_store):
        mock_embedding_service.embed_text.side_effect = EmbeddingError("provider down")
        outcome = chat_service.retrieve_context("lamp?")

        assert outcome.context == []
        mock_vector_store.search.assert_not_called()

    @patch("item_vector_sync.infrastructure.qdrant.client.requests.post")
    def test_unreadable_search_response_degrades(self, mock_post, settings, mock_embedding_service, mock_chat_service):
        resp = make_response(200, text="<html>proxy error</html>")
        resp.json.side_effect = json.JSONDecodeError("Expecting value", resp.text, 0)
        mock_post.return_value = resp
        service = ItemChatService(settings, mock_embedding_service, mock_chat_service, QdrantVectorStore(settings))

        response = service.chat("lamp?")

        assert response.context == []
        assert response.degraded is True
        assert response.answer == "The brass lamp is in stock."


class TestChat:
    """Test the composed chat flow."""

    def test_chat_returns_answer_context_and_messages(self, chat_service, mock_vector_store, mock_chat_service):
        mock_vector_store.search.return_value = [QueryResult(id="a", score=0.9, payload={"name": "Lamp"})]
        history = [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello"}]

        resp = chat_service.chat("Any lamps?", history)

        assert resp.answer == "The brass lamp is in stock."
        assert resp.context == [{"name": "Lamp"}]
        assert resp.messages[1:3] == history
        assert resp.messages[-1] == {"role": "user", "content": "Any lamps?"}
        mock_chat_service.complete.assert_called_once_with(
            resp.messages, temperature=TEMPERATURE, max_tokens=MAX_TOKENS
        )

    def test_completion_parameters(self):
        assert TEMPERATURE == 0.7
        assert MAX_TOKENS == 500

    def test_chat_still_answers_when_retrieval_fails(self, chat_service, mock_vector_store):
        mock_vector_store.search.side_effect = VectorStoreError("Qdrant search failed", "down")

        resp = chat_service.chat("Any lamps?")

        assert resp.answer == "The brass lamp is in stock."
        assert resp.context == []
        assert resp.degraded is True
        assert "\n[]\n" in resp.messages[0]["content"]

    def test_completion_failure_propagates(self, chat_service, mock_chat_service):
        mock_chat_service.complete.side_effect = ChatCompletionError("Chat completion failed")
        with pytest.raises(ChatCompletionError):
            chat_service.chat("Any lamps?")

    def test_to_dict_shape(self, chat_service):
        data = chat_service.chat("Any lamps?").to_dict()
        assert set(data) == {"answer", "context", "messages"}
