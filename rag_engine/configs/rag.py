"""
RAG pipeline configuration settings.

Chunking, batching, caching and retrieval knobs for the ingestion and
question-answering pipeline.

Dependencies: pydantic, pydantic_settings
System role: Pipeline tuning for indexing and search
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RAGSettings(BaseSettings):
    """Document pipeline configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="RAG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking
    chunk_size: int = Field(default=1000, ge=1, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=200, ge=0, description="Overlap between consecutive chunks")
    separator: str = Field(default="\n", description="Section separator for the separator strategy")
    chunk_strategy: Literal["separator", "paragraph", "sentence", "recursive"] = Field(
        default="separator",
        description="Chunking strategy",
    )
    language: str = Field(default="en", description="Language stamped on indexed documents")
    tags: list[str] = Field(default_factory=list, description="Tags added to every indexed document")

    # Batching and memory
    batch_size: int = Field(default=3, ge=1, description="Documents embedded per batch")
    batch_pause_ms: int = Field(default=50, ge=0, description="Pause between embedding batches (ms)")
    memory_limit_mb: int = Field(default=512, ge=1, description="Embedding cache memory ceiling (MB)")
    cleanup_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Maximum age of the embedding cache before it is cleared",
    )
    cache_embeddings: bool = Field(default=True, description="Cache embeddings by content hash")

    # Retrieval and answering
    max_search_results: int = Field(default=5, ge=1, description="Default k for search")
    max_context_chars: int = Field(
        default=6000,
        ge=100,
        description="Upper bound on context characters sent to the generator",
    )

    knowledge_base_dir: Path = Field(
        default=Path("./knowledge_packs"),
        description="Root directory used as the default path of knowledge packs",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "RAGSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self
