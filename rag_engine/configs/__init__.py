"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from rag_engine.configs.ollama import OllamaSettings
from rag_engine.configs.rag import RAGSettings
from rag_engine.configs.settings import Settings, get_settings
from rag_engine.configs.vector_store import VectorStoreSettings

__all__ = [
    "OllamaSettings",
    "RAGSettings",
    "Settings",
    "VectorStoreSettings",
    "get_settings",
]
