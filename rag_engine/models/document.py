"""
Document domain model.

A document is one chunk of source text plus its provenance metadata and,
once embedded, its vector.

Dependencies: pydantic
System role: Unit of storage and retrieval
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentMetadata(BaseModel):
    """
    Provenance of a chunk.

    Unknown keys supplied by callers are kept as extra fields and can be
    used as search filters.
    """

    model_config = ConfigDict(extra="allow")

    source: str = Field(description="Path or origin of the source file")
    title: str | None = Field(default=None, description="Document title")
    author: str | None = Field(default=None, description="Document author")
    page: int | None = Field(default=None, ge=1, description="1-based page number (paged formats)")
    chunk_index: int | None = Field(default=None, ge=0, description="Position of the chunk in its file")
    total_chunks: int | None = Field(default=None, ge=1, description="Number of chunks produced for the file")
    language: str | None = Field(default=None, description="Content language code")
    tags: list[str] = Field(default_factory=list, description="Unique tags, insertion ordered")
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(tag for tag in value if tag))

    @model_validator(mode="after")
    def _check_consistency(self) -> "DocumentMetadata":
        if (
            self.chunk_index is not None
            and self.total_chunks is not None
            and self.chunk_index >= self.total_chunks
        ):
            raise ValueError("chunk_index must be smaller than total_chunks")
        if self.created_at > self.updated_at:
            raise ValueError("created_at must not be later than updated_at")
        return self

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a declared or extra field by name."""
        if key in type(self).model_fields:
            return getattr(self, key)
        return (self.model_extra or {}).get(key, default)


class Document(BaseModel):
    """Stored chunk with metadata and optional embedding."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique document id")
    content: str = Field(description="Chunk text content")
    metadata: DocumentMetadata = Field(description="Chunk provenance")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
