"""
Vector store factory.

Selects the backend from VECTOR_STORE_STORE_TYPE so callers get the same
interface regardless of the underlying implementation.

Dependencies: rag_engine.boundary.vdb, rag_engine.configs
System role: Vector store instantiation and selection
"""

import logging

from rag_engine.boundary.embeddings.base import EmbeddingProvider
from rag_engine.boundary.vdb.base import VectorStore
from rag_engine.boundary.vdb.faiss_store import FAISSVectorStore
from rag_engine.boundary.vdb.memory_store import InMemoryVectorStore
from rag_engine.configs import get_settings
from rag_engine.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_vector_store(
    embedding_provider: EmbeddingProvider,
    settings: VectorStoreSettings | None = None,
) -> VectorStore:
    """
    Build the configured vector store.

    Args:
        embedding_provider: Provider shared with the store
        settings: Vector store settings; application settings when None

    Returns:
        VectorStore: Uninitialized store instance

    Raises:
        ValueError: If store_type is invalid
    """
    settings = settings or get_settings().vector_store
    store_type = settings.store_type.lower()

    if store_type == "faiss":
        logger.info(f"{__name__}:get_vector_store - Creating FAISS vector store at {settings.persist_directory}")
        return FAISSVectorStore(
            embedding_provider,
            persist_directory=settings.persist_directory,
            index_name=settings.index_name,
            similarity_threshold=settings.similarity_threshold,
        )

    if store_type == "memory":
        logger.info(f"{__name__}:get_vector_store - Creating in-memory vector store")
        return InMemoryVectorStore(
            embedding_provider,
            similarity_threshold=settings.similarity_threshold,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. Must be 'faiss' or 'memory'."
    )
