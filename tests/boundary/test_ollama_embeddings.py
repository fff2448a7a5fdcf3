"""
Tests for the Ollama embedding client.

The Ollama HTTP API is simulated with httpx.MockTransport.
"""

import json

import httpx
import pytest

from rag_engine.boundary.embeddings.ollama_embeddings import OllamaEmbeddingProvider
from rag_engine.configs import OllamaSettings
from rag_engine.core.resource_tracker import ResourceTracker


class FakeOllama:
    """Minimal /api/* handler recording every request."""

    def __init__(self, fail_prompts: tuple[str, ...] = (), models: tuple[str, ...] = ("nomic-embed-text:latest",)) -> None:
        self.requests: list[httpx.Request] = []
        self.fail_prompts = fail_prompts
        self.models = models

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/embeddings":
            prompt = json.loads(request.content)["prompt"]
            if prompt in self.fail_prompts:
                return httpx.Response(500, json={"error": "boom"})
            return httpx.Response(200, json={"embedding": [float(len(prompt)), 1.0, 0.5]})
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": [{"name": name} for name in self.models]})
        if request.url.path == "/api/show":
            return httpx.Response(
                200,
                json={"model_info": {"nomic-bert.embedding_length": 768, "nomic-bert.context_length": 2048}},
            )
        if request.url.path == "/api/pull":
            return httpx.Response(200, json={"status": "success"})
        return httpx.Response(404)

    def count(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)


def make_provider(server: FakeOllama, cache: ResourceTracker | None = None) -> OllamaEmbeddingProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(server), base_url="http://ollama.test")
    return OllamaEmbeddingProvider(OllamaSettings(), client=client, cache=cache)


class TestEmbedding:
    """embed_one / embed_many."""

    @pytest.mark.asyncio
    async def test_embed_one_posts_model_and_prompt(self) -> None:
        """Should send the configured model and the text as prompt."""
        server = FakeOllama()
        provider = make_provider(server)

        vector = await provider.embed_one("hello")

        assert vector == [5.0, 1.0, 0.5]
        body = json.loads(server.requests[0].content)
        assert body == {"model": "nomic-embed-text", "prompt": "hello"}

    @pytest.mark.asyncio
    async def test_embed_one_returns_none_on_error(self) -> None:
        """Should swallow service errors into None."""
        provider = make_provider(FakeOllama(fail_prompts=("bad",)))

        assert await provider.embed_one("bad") is None

    @pytest.mark.asyncio
    async def test_embed_one_returns_none_when_unreachable(self) -> None:
        """Should return None when the server cannot be reached."""
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://ollama.test")
        provider = OllamaEmbeddingProvider(client=client)

        assert await provider.embed_one("hello") is None

    @pytest.mark.asyncio
    async def test_embed_many_is_ordered_and_aligned(self) -> None:
        """Should return one slot per input in input order, None for failures."""
        server = FakeOllama(fail_prompts=("bb",))
        provider = make_provider(server)

        result = await provider.embed_many(["a", "bb", "ccc"])

        assert len(result.embeddings) == 3
        assert result.embeddings[0][0] == 1.0
        assert result.embeddings[1] is None
        assert result.embeddings[2][0] == 3.0
        assert result.failed_indices == [1]
        assert result.token_count == 2
        assert result.model_id == "nomic-embed-text"
        assert [json.loads(r.content)["prompt"] for r in server.requests] == ["a", "bb", "ccc"]

    @pytest.mark.asyncio
    async def test_dimension_learned_from_first_vector(self) -> None:
        """Should replace the configured dimension with the observed one."""
        provider = make_provider(FakeOllama())
        assert provider.dimension == 384

        await provider.embed_one("x")

        assert provider.dimension == 3


class TestEmbeddingCache:
    """Content-addressed caching through the ResourceTracker."""

    @pytest.mark.asyncio
    async def test_identical_text_hits_service_once(self) -> None:
        """Should serve repeated text from the cache."""
        server = FakeOllama()
        tracker = ResourceTracker()
        provider = make_provider(server, cache=tracker)

        first = await provider.embed_one("same text")
        second = await provider.embed_one("same text")

        assert first == second
        assert server.count("/api/embeddings") == 1
        assert provider.request_count == 1
        assert tracker.memory_usage_bytes == 3 * 8

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self) -> None:
        """Should retry failed texts on the next call."""
        server = FakeOllama(fail_prompts=("flaky",))
        provider = make_provider(server, cache=ResourceTracker())

        await provider.embed_one("flaky")
        await provider.embed_one("flaky")

        assert server.count("/api/embeddings") == 2


class TestAvailabilityAndInfo:
    """is_available, model_info and pull_model."""

    @pytest.mark.asyncio
    async def test_available_when_model_listed_with_latest_tag(self) -> None:
        """Should accept 'model:latest' as the configured model."""
        assert await make_provider(FakeOllama()).is_available() is True

    @pytest.mark.asyncio
    async def test_unavailable_when_model_missing(self) -> None:
        """Should report False when the model is not pulled."""
        assert await make_provider(FakeOllama(models=("llama3:8b",))).is_available() is False

    @pytest.mark.asyncio
    async def test_unavailable_never_raises(self) -> None:
        """Should report False instead of raising on connection errors."""
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://ollama.test")

        assert await OllamaEmbeddingProvider(client=client).is_available() is False

    @pytest.mark.asyncio
    async def test_model_info_reads_show_endpoint(self) -> None:
        """Should read embedding and context length from /api/show."""
        info = await make_provider(FakeOllama()).model_info()

        assert info.name == "nomic-embed-text"
        assert info.dimension == 768
        assert info.max_tokens == 2048

    @pytest.mark.asyncio
    async def test_pull_model(self) -> None:
        """Should post the model name to /api/pull."""
        server = FakeOllama()

        assert await make_provider(server).pull_model() is True
        assert server.count("/api/pull") == 1
