"""
Vector store configuration settings.

Selects the vector store backend and where the on-disk index lives.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (in-memory for tests, FAISS on disk otherwise)."""

    model_config = SettingsConfigDict(
        env_prefix="VECTOR_STORE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="faiss",
        description="Vector store type: 'memory' or 'faiss'",
    )
    persist_directory: Path = Field(
        default=Path("./data/vectors"),
        description="Directory holding the FAISS index and document sidecar",
    )
    index_name: str = Field(default="documents", description="Base filename of the index")
    similarity_threshold: float = Field(
        default=0.15,
        ge=-1.0,
        le=1.0,
        description="Minimum cosine similarity for a search hit",
    )
