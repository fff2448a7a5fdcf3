"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the engine
"""

from functools import lru_cache

from pydantic import Field

from rag_engine.configs.base import BaseSettings
from rag_engine.configs.ollama import OllamaSettings
from rag_engine.configs.rag import RAGSettings
from rag_engine.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified settings aggregating all config modules."""

    ollama: OllamaSettings = Field(default_factory=OllamaSettings)
    rag: RAGSettings = Field(default_factory=RAGSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once and the instance is cached.

    Returns:
        Settings: Application settings instance

    Usage:
        from rag_engine.configs import get_settings
        settings = get_settings()
    """
    return Settings()
