"""Tests for the Ollama chat client."""

import json

import httpx
import pytest

from rag_engine.boundary.llm.ollama_provider import OllamaTextGenerationProvider
from rag_engine.configs import OllamaSettings
from rag_engine.core.exceptions import GenerationError
from rag_engine.models.generation import ChatMessage, GenerationRequest


def make_provider(handler) -> OllamaTextGenerationProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://ollama.test")
    return OllamaTextGenerationProvider(OllamaSettings(text_model="qwen2.5:7b"), client=client)


@pytest.fixture
def request_model() -> GenerationRequest:
    return GenerationRequest(
        messages=[
            ChatMessage(role="system", content="Answer from context."),
            ChatMessage(role="user", content="What is 2+2?"),
        ],
        temperature=0.2,
        max_tokens=100,
    )


class TestOllamaTextGeneration:
    """/api/chat calls."""

    @pytest.mark.asyncio
    async def test_generate_sends_chat_payload(self, request_model: GenerationRequest) -> None:
        """Should send messages with stream disabled and sampling options."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(json.loads(request.content))
            return httpx.Response(
                200,
                json={"message": {"role": "assistant", "content": "4"}, "prompt_eval_count": 20, "eval_count": 2},
            )

        response = await make_provider(handler).generate(request_model)

        assert response.content == "4"
        assert response.tokens_used == 22
        assert response.model == "qwen2.5:7b"
        assert seen["stream"] is False
        assert seen["options"] == {"temperature": 0.2, "num_predict": 100}
        assert seen["messages"][1] == {"role": "user", "content": "What is 2+2?"}

    @pytest.mark.asyncio
    async def test_token_estimate_when_counts_missing(self, request_model: GenerationRequest) -> None:
        """Should estimate tokens when the server omits eval counts."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"message": {"content": "four"}})

        response = await make_provider(handler).generate(request_model)

        assert response.tokens_used > 0

    @pytest.mark.asyncio
    async def test_http_error_raises_generation_error(self, request_model: GenerationRequest) -> None:
        """Should raise GenerationError on non-2xx responses."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="model failed to load")

        with pytest.raises(GenerationError) as exc_info:
            await make_provider(handler).generate(request_model)

        assert "500" in exc_info.value.message
        assert exc_info.value.details["model"] == "qwen2.5:7b"

    @pytest.mark.asyncio
    async def test_timeout_raises_generation_error(self, request_model: GenerationRequest) -> None:
        """Should raise GenerationError when the request times out."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(GenerationError, match="timed out"):
            await make_provider(handler).generate(request_model)

    @pytest.mark.asyncio
    async def test_malformed_response_raises(self, request_model: GenerationRequest) -> None:
        """Should raise GenerationError when the reply has no message."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"done": True})

        with pytest.raises(GenerationError):
            await make_provider(handler).generate(request_model)

    @pytest.mark.asyncio
    async def test_is_available(self) -> None:
        """Should check the text model against /api/tags."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"models": [{"name": "qwen2.5:7b"}]})

        assert await make_provider(handler).is_available() is True
