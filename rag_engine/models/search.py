"""
Search domain models.

Query, result and statistics schemas for vector store operations.

Dependencies: pydantic
System role: Type definitions for vector search
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from rag_engine.models.document import Document


class SearchQuery(BaseModel):
    """Query parameters for vector search."""

    query: str = Field(description="Natural-language query text")
    k: int = Field(default=5, ge=1, description="Maximum number of results")
    filters: dict[str, Any] | None = Field(
        default=None,
        description="Exact-match metadata filters; a list-valued field matches by membership",
    )
    threshold: float | None = Field(
        default=None,
        description="Minimum cosine similarity; the store default is used when unset",
    )
    document_ids: list[str] | None = Field(
        default=None,
        description="Restrict candidates to these document ids (knowledge pack scoping)",
    )


class SearchResult(BaseModel):
    """Single search hit."""

    document: Document
    score: float = Field(description="Cosine similarity in [-1, 1]")
    highlights: list[str] = Field(default_factory=list, description="Query-term excerpts")


class VectorStoreStats(BaseModel):
    """Vector store statistics."""

    total_documents: int = Field(default=0, description="Distinct source files")
    total_chunks: int = Field(default=0, description="Stored chunk records")
    total_size: int = Field(default=0, description="UTF-8 bytes of stored content")
    last_updated: datetime | None = Field(default=None, description="Time of the last mutation")
