"""
Domain models.

Pydantic schemas shared by the processors, providers, stores and the
RAG manager.
"""

from rag_engine.models.answer import AnswerMetadata, AnswerOptions, AnswerResult
from rag_engine.models.document import Document, DocumentMetadata
from rag_engine.models.embedding import EmbeddingResult, ModelInfo
from rag_engine.models.generation import ChatMessage, GenerationRequest, GenerationResponse
from rag_engine.models.indexing import (
    FileIndexingResult,
    FileStatus,
    IndexingJob,
    IndexingProgress,
    JobStatus,
)
from rag_engine.models.knowledge_pack import KnowledgePack, RAGStats
from rag_engine.models.search import SearchQuery, SearchResult, VectorStoreStats

__all__ = [
    "AnswerMetadata",
    "AnswerOptions",
    "AnswerResult",
    "ChatMessage",
    "Document",
    "DocumentMetadata",
    "EmbeddingResult",
    "FileIndexingResult",
    "FileStatus",
    "GenerationRequest",
    "GenerationResponse",
    "IndexingJob",
    "IndexingProgress",
    "JobStatus",
    "KnowledgePack",
    "ModelInfo",
    "RAGStats",
    "SearchQuery",
    "SearchResult",
    "VectorStoreStats",
]
