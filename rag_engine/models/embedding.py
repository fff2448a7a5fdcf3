"""
Embedding domain models.

Dependencies: pydantic
System role: Embedding provider contracts
"""

from pydantic import BaseModel, Field


class EmbeddingResult(BaseModel):
    """Batch embedding output, index-aligned with the input texts."""

    embeddings: list[list[float] | None] = Field(description="One vector per input, None on failure")
    token_count: int = Field(default=0, description="Estimated tokens across embedded texts")
    model_id: str = Field(description="Embedding model used")

    @property
    def failed_indices(self) -> list[int]:
        return [i for i, vector in enumerate(self.embeddings) if vector is None]


class ModelInfo(BaseModel):
    """Embedding model description."""

    name: str
    dimension: int
    max_tokens: int
