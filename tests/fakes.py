"""
Deterministic stand-ins for the model services.

Dependencies: rag_engine.boundary
System role: Test doubles shared by fixtures and test modules
"""

import re

from rag_engine.boundary.embeddings.base import EmbeddingProvider
from rag_engine.boundary.llm.base import TextGenerationProvider
from rag_engine.core.exceptions import GenerationError
from rag_engine.models.embedding import ModelInfo
from rag_engine.models.generation import GenerationRequest, GenerationResponse

WORD = re.compile(r"[a-z]+")


class FakeEmbeddingProvider(EmbeddingProvider):
    """
    Bag-of-words embedder.

    Every distinct word gets its own dimension, so texts sharing no words
    have cosine similarity exactly 0.
    """

    name = "fake"
    DIMENSION = 1024

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.calls = 0
        self.fail_on = fail_on
        self.available = True
        self._vocabulary: dict[str, int] = {}

    @property
    def model(self) -> str:
        return "fake-embed"

    @property
    def dimension(self) -> int:
        return self.DIMENSION

    async def embed_one(self, text: str) -> list[float] | None:
        self.calls += 1
        if any(marker in text for marker in self.fail_on):
            return None
        vector = [0.0] * self.DIMENSION
        for word in WORD.findall(text.lower()):
            slot = self._vocabulary.setdefault(word, len(self._vocabulary)) % self.DIMENSION
            vector[slot] += 1.0
        return vector

    async def is_available(self) -> bool:
        return self.available

    async def model_info(self) -> ModelInfo:
        return ModelInfo(name=self.model, dimension=self.DIMENSION, max_tokens=2048)


class FakeTextProvider(TextGenerationProvider):
    """Records requests and replies with a canned answer or a GenerationError."""

    name = "fake"

    def __init__(self, answer: str = "Preheat the oven and bake the bread.", fail: bool = False) -> None:
        self.answer = answer
        self.fail = fail
        self.requests: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.requests.append(request)
        if self.fail:
            raise GenerationError("model crashed", "fake-chat")
        return GenerationResponse(content=self.answer, tokens_used=42, model="fake-chat")

    async def is_available(self) -> bool:
        return True
