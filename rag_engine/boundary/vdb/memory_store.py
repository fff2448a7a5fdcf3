"""
In-memory vector store.

Records live in an insertion-ordered dict and are scored with a linear
numpy scan. Nothing is persisted.

Dependencies: numpy
System role: Volatile vector store for tests and ephemeral sessions
"""

import numpy as np

from rag_engine.boundary.vdb.base import VectorStore
from rag_engine.boundary.vdb.similarity import cosine_scores
from rag_engine.models.document import Document


class InMemoryVectorStore(VectorStore):
    """Linear-scan cosine store."""

    name = "memory"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._records: dict[str, Document] = {}

    @property
    def dimension(self) -> int | None:
        for document in self._records.values():
            return len(document.embedding)
        return None

    async def _load(self) -> None:
        self._records = {}

    async def _upsert(self, documents: list[Document]) -> None:
        for document in documents:
            self._records[document.id] = document

    async def _score(self, vector: list[float]) -> list[tuple[Document, float]]:
        documents = list(self._records.values())
        if not documents:
            return []
        matrix = np.asarray([doc.embedding for doc in documents], dtype=np.float64)
        scores = cosine_scores(matrix, vector)
        return [(doc, float(score)) for doc, score in zip(documents, scores)]

    async def _delete(self, ids: list[str]) -> int:
        removed = 0
        for doc_id in ids:
            if self._records.pop(doc_id, None) is not None:
                removed += 1
        return removed

    async def _get(self, ids: list[str]) -> list[Document]:
        return [self._records[doc_id] for doc_id in ids if doc_id in self._records]

    async def _all(self) -> list[Document]:
        return list(self._records.values())

    async def _clear(self) -> None:
        self._records.clear()
