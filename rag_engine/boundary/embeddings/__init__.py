"""
Embedding provider boundary.

- EmbeddingProvider: interface used by vector stores and the RAG manager
- OllamaEmbeddingProvider: /api/embeddings client with content-hash caching
"""

from rag_engine.boundary.embeddings.base import EmbeddingProvider
from rag_engine.boundary.embeddings.ollama_embeddings import OllamaEmbeddingProvider

__all__ = ["EmbeddingProvider", "OllamaEmbeddingProvider"]
