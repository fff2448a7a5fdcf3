"""
Ollama embedding client.

Calls /api/embeddings once per text over httpx. Failures are logged and
reported as None so a batch can continue past a bad chunk. When a
ResourceTracker is supplied, vectors are served from and stored into its
content-addressed cache.

Dependencies: httpx, rag_engine.configs, rag_engine.core.resource_tracker
System role: Embedding service adapter
"""

import logging

import httpx

from rag_engine.boundary.embeddings.base import EmbeddingProvider
from rag_engine.configs.ollama import OllamaSettings
from rag_engine.core.resource_tracker import ResourceTracker
from rag_engine.models.embedding import ModelInfo

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider(EmbeddingProvider):
    """Embedding provider backed by a local Ollama server."""

    name = "ollama"

    def __init__(
        self,
        settings: OllamaSettings | None = None,
        client: httpx.AsyncClient | None = None,
        cache: ResourceTracker | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            settings: Ollama settings (base URL, model, timeouts)
            client: Preconfigured client whose base_url points at the server
            cache: Embedding cache; caching is disabled when None
        """
        self._settings = settings or OllamaSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.embedding_timeout,
        )
        self._cache = cache
        self._dimension: int | None = None
        self.request_count = 0

    @property
    def model(self) -> str:
        return self._settings.embedding_model

    @property
    def dimension(self) -> int:
        return self._dimension or self._settings.embedding_dimension

    async def embed_one(self, text: str) -> list[float] | None:
        if self._cache is not None:
            cached = self._cache.get(text)
            if cached is not None:
                return cached

        self.request_count += 1
        try:
            response = await self._client.post(
                "/api/embeddings",
                json={"model": self.model, "prompt": text},
                timeout=self._settings.embedding_timeout,
            )
            response.raise_for_status()
            embedding = response.json().get("embedding")
            if not embedding:
                raise ValueError("response carried no embedding")
            vector = [float(value) for value in embedding]
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.warning(
                f"{__name__}:embed_one - Embedding failed ({type(e).__name__}): {e}",
                extra={"model": self.model, "text_length": len(text)},
            )
            return None

        if self._dimension is None:
            self._dimension = len(vector)
            logger.info(f"{__name__}:embed_one - Learned embedding dimension {self._dimension}")
        if self._cache is not None:
            self._cache.put(text, vector)
        return vector

    async def is_available(self) -> bool:
        try:
            response = await self._client.get(
                "/api/tags",
                timeout=self._settings.availability_timeout,
            )
            response.raise_for_status()
            names = {entry.get("name") for entry in response.json().get("models", [])}
        except Exception as e:
            logger.warning(f"{__name__}:is_available - Ollama not reachable ({type(e).__name__}): {e}")
            return False

        available = self.model in names or f"{self.model}:latest" in names
        if not available:
            logger.warning(f"{__name__}:is_available - Model {self.model} not found on server")
        return available

    async def model_info(self) -> ModelInfo:
        dimension = self.dimension
        max_tokens = self._settings.max_tokens_default
        try:
            response = await self._client.post(
                "/api/show",
                json={"model": self.model, "name": self.model},
                timeout=self._settings.availability_timeout,
            )
            response.raise_for_status()
            details = response.json().get("model_info") or {}
            for key, value in details.items():
                if key.endswith(".embedding_length"):
                    dimension = int(value)
                elif key.endswith(".context_length"):
                    max_tokens = int(value)
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"{__name__}:model_info - Falling back to defaults ({type(e).__name__}): {e}")
        return ModelInfo(name=self.model, dimension=dimension, max_tokens=max_tokens)

    async def pull_model(self) -> bool:
        """
        Ask the server to download the embedding model.

        Returns:
            bool: True when the pull completed
        """
        logger.info(f"{__name__}:pull_model - Pulling {self.model}")
        try:
            response = await self._client.post(
                "/api/pull",
                json={"model": self.model, "name": self.model, "stream": False},
                timeout=self._settings.pull_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"{__name__}:pull_model - Pull failed ({type(e).__name__}): {e}")
            return False
        return True

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
