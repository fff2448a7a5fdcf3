"""
Core business logic module.

Contains the exception hierarchy, chunking, document processing, the
embedding cache, knowledge packs and the RAG manager.
"""

from rag_engine.core.exceptions import (
    DocumentProcessingError,
    EmbeddingError,
    ExtractionError,
    GenerationError,
    KnowledgePackNotFoundError,
    RAGEngineError,
    UnsupportedFormatError,
    ValidationError,
    VectorStoreError,
    VectorStoreNotInitializedError,
)

__all__ = [
    "DocumentProcessingError",
    "EmbeddingError",
    "ExtractionError",
    "GenerationError",
    "KnowledgePackNotFoundError",
    "RAGEngineError",
    "UnsupportedFormatError",
    "ValidationError",
    "VectorStoreError",
    "VectorStoreNotInitializedError",
]
