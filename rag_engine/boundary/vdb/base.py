"""
Vector store interface.

Backends implement storage and raw scoring; embedding of documents and
queries, threshold, filter and ranking logic live here so every backend
answers a SearchQuery the same way.

Dependencies: rag_engine.boundary.embeddings, rag_engine.models
System role: Vector storage and similarity search contract
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from rag_engine.boundary.embeddings.base import EmbeddingProvider
from rag_engine.boundary.vdb.similarity import highlight, matches_filters
from rag_engine.core.exceptions import (
    EmbeddingError,
    VectorStoreError,
    VectorStoreNotInitializedError,
)
from rag_engine.models.document import Document
from rag_engine.models.search import SearchQuery, SearchResult, VectorStoreStats

logger = logging.getLogger(__name__)


class VectorStore(ABC):
    """Base class for vector store backends."""

    name: str = "base"

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        similarity_threshold: float = 0.15,
    ) -> None:
        """
        Initialize store.

        Args:
            embedding_provider: Provider used for documents without vectors and for queries
            similarity_threshold: Default minimum cosine score of a hit
        """
        self._embeddings = embedding_provider
        self._threshold = similarity_threshold
        self._initialized = False
        self._lock = asyncio.Lock()
        self._last_updated: datetime | None = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def similarity_threshold(self) -> float:
        return self._threshold

    def _require_initialized(self, operation: str) -> None:
        if not self._initialized:
            raise VectorStoreNotInitializedError(operation, {"store": self.name})

    def _touch(self) -> None:
        self._last_updated = datetime.now(timezone.utc)

    async def initialize(self) -> None:
        """Load persisted state; idempotent."""
        if self._initialized:
            return
        await self._load()
        self._initialized = True
        logger.info(f"{__name__}:initialize - {self.name} store ready")

    async def add_documents(self, documents: list[Document]) -> list[Document]:
        """
        Embed (where needed) and store documents.

        Documents whose embedding fails, or whose vector dimension differs
        from the store's, are skipped with a warning.

        Args:
            documents: Documents to store; duplicate ids replace earlier records

        Returns:
            list[Document]: Stored documents with embeddings attached

        Raises:
            VectorStoreNotInitializedError: When called before initialize()
        """
        self._require_initialized("add_documents")
        if not documents:
            return []

        prepared: list[Document] = []
        expected_dim = self.dimension
        for document in documents:
            vector = document.embedding
            if vector is None:
                vector = await self._embeddings.embed_one(document.content)
            if vector is None:
                logger.warning(f"{__name__}:add_documents - Skipping {document.id}: embedding failed")
                continue
            if expected_dim is None:
                expected_dim = len(vector)
            elif len(vector) != expected_dim:
                logger.warning(
                    f"{__name__}:add_documents - Skipping {document.id}: dimension "
                    f"{len(vector)} != {expected_dim}"
                )
                continue
            prepared.append(document.model_copy(update={"embedding": list(vector)}))

        if prepared:
            async with self._lock:
                await self._upsert(prepared)
                self._touch()
                await self._persist()
        logger.info(f"{__name__}:add_documents - Stored {len(prepared)}/{len(documents)} documents")
        return prepared

    async def search(self, query: SearchQuery) -> list[SearchResult]:
        """
        Rank stored documents by cosine similarity to the query text.

        Args:
            query: Query text, k, filters, threshold and candidate ids

        Returns:
            list[SearchResult]: At most k hits with score >= threshold, best first,
                ties in insertion order

        Raises:
            VectorStoreNotInitializedError: When called before initialize()
            EmbeddingError: When the query cannot be embedded
            VectorStoreError: When the query dimension differs from the stored vectors
        """
        self._require_initialized("search")
        vector = await self._embeddings.embed_one(query.query)
        if vector is None:
            raise EmbeddingError("Failed to embed search query", self._embeddings.model)

        if self.dimension is not None and len(vector) != self.dimension:
            raise VectorStoreError(
                f"Query dimension {len(vector)} does not match store dimension {self.dimension}",
                "search",
            )

        threshold = self._threshold if query.threshold is None else query.threshold
        allowed = set(query.document_ids) if query.document_ids is not None else None

        hits = []
        for document, score in await self._score(vector):
            if allowed is not None and document.id not in allowed:
                continue
            if score < threshold or not matches_filters(document.metadata, query.filters):
                continue
            hits.append((document, score))

        hits.sort(key=lambda hit: -hit[1])
        return [
            SearchResult(
                document=document,
                score=score,
                highlights=highlight(query.query, document.content),
            )
            for document, score in hits[: query.k]
        ]

    async def delete_documents(self, ids: list[str]) -> int:
        """Delete documents by id; returns how many existed."""
        self._require_initialized("delete_documents")
        async with self._lock:
            removed = await self._delete(ids)
            if removed:
                self._touch()
                await self._persist()
        logger.info(f"{__name__}:delete_documents - Deleted {removed} documents")
        return removed

    async def get_documents(self, ids: list[str]) -> list[Document]:
        """Fetch stored documents by id, skipping unknown ids."""
        self._require_initialized("get_documents")
        return await self._get(ids)

    async def get_stats(self) -> VectorStoreStats:
        self._require_initialized("get_stats")
        documents = await self._all()
        return VectorStoreStats(
            total_documents=len({doc.metadata.source for doc in documents}),
            total_chunks=len(documents),
            total_size=sum(len(doc.content.encode("utf-8")) for doc in documents),
            last_updated=self._last_updated,
        )

    async def clear(self) -> None:
        self._require_initialized("clear")
        async with self._lock:
            await self._clear()
            self._touch()
            await self._persist()
        logger.info(f"{__name__}:clear - Store cleared")

    async def close(self) -> None:
        """Release backend resources."""

    @property
    @abstractmethod
    def dimension(self) -> int | None:
        """Vector dimension of stored records, None while empty."""

    @abstractmethod
    async def _load(self) -> None: ...

    @abstractmethod
    async def _upsert(self, documents: list[Document]) -> None: ...

    @abstractmethod
    async def _score(self, vector: list[float]) -> list[tuple[Document, float]]:
        """Score every stored document, returned in insertion order."""

    @abstractmethod
    async def _delete(self, ids: list[str]) -> int: ...

    @abstractmethod
    async def _get(self, ids: list[str]) -> list[Document]: ...

    @abstractmethod
    async def _all(self) -> list[Document]: ...

    @abstractmethod
    async def _clear(self) -> None: ...

    async def _persist(self) -> None:
        """Write state to durable storage; no-op for volatile backends."""
