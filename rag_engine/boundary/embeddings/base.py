"""
Embedding provider interface.

Dependencies: rag_engine.models
System role: Contract between the engine and embedding services
"""

import math
from abc import ABC, abstractmethod

from rag_engine.models.embedding import EmbeddingResult, ModelInfo


def estimate_tokens(text: str) -> int:
    """Rough token estimate of four characters per token."""
    return math.ceil(len(text) / 4)


class EmbeddingProvider(ABC):
    """Turns text into vectors."""

    name: str = "base"

    @property
    @abstractmethod
    def model(self) -> str:
        """Embedding model identifier."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Vector dimension produced by the model."""

    @abstractmethod
    async def embed_one(self, text: str) -> list[float] | None:
        """Embed a single text; None when the service fails."""

    async def embed_many(self, texts: list[str]) -> EmbeddingResult:
        """
        Embed texts one at a time, preserving input order.

        Args:
            texts: Texts to embed

        Returns:
            EmbeddingResult: Vectors index-aligned with texts, None for failures
        """
        embeddings: list[list[float] | None] = []
        token_count = 0
        for text in texts:
            vector = await self.embed_one(text)
            embeddings.append(vector)
            if vector is not None:
                token_count += estimate_tokens(text)
        return EmbeddingResult(embeddings=embeddings, token_count=token_count, model_id=self.model)

    @abstractmethod
    async def is_available(self) -> bool:
        """Probe the service; must never raise."""

    @abstractmethod
    async def model_info(self) -> ModelInfo:
        """Describe the embedding model."""

    async def aclose(self) -> None:
        """Release network resources."""
