"""
Answer domain models.

Options and results of the retrieve-then-generate operation.

Dependencies: pydantic
System role: Question answering contracts
"""

from typing import Any

from pydantic import BaseModel, Field

from rag_engine.models.search import SearchResult


class AnswerOptions(BaseModel):
    """Options for search_and_answer."""

    k: int | None = Field(default=None, ge=1, description="Result count; settings default when unset")
    filters: dict[str, Any] | None = None
    threshold: float | None = None
    knowledge_pack: str | None = Field(default=None, description="Restrict retrieval to this pack")
    style: str | None = Field(default=None, description="Answer style hint, e.g. 'concise'")
    language: str | None = Field(default=None, description="Language the answer should be written in")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)


class AnswerMetadata(BaseModel):
    """Timings and diagnostics of an answer."""

    query: str
    search_time_ms: float = 0.0
    generation_time_ms: float = 0.0
    token_estimate: int = 0
    memory_usage_bytes: int = 0
    error: str | None = None


class AnswerResult(BaseModel):
    """Retrieved context plus the generated answer."""

    search_results: list[SearchResult]
    answer: str
    metadata: AnswerMetadata
