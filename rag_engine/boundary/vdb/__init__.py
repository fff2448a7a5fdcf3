"""
Vector database boundary layer.

- VectorStore: backend-neutral interface (embedding, filtering, ranking)
- InMemoryVectorStore: volatile linear-scan store
- FAISSVectorStore: on-disk FAISS index with JSON docstore

Dependencies: faiss-cpu, numpy
System role: Vector store adapters for RAG retrieval
"""

from rag_engine.boundary.vdb.base import VectorStore
from rag_engine.boundary.vdb.faiss_store import FAISSVectorStore
from rag_engine.boundary.vdb.memory_store import InMemoryVectorStore
from rag_engine.boundary.vdb.vector_store_factory import get_vector_store

__all__ = ["FAISSVectorStore", "InMemoryVectorStore", "VectorStore", "get_vector_store"]
