"""
FAISS vector store persisted to local disk.

Normalized vectors go into a faiss IndexIDMap2 over IndexFlatIP, so inner
product equals cosine similarity. Documents and the id mapping are kept in
a JSON sidecar next to the index. Both files are written to a temporary
path and swapped in with os.replace.

Dependencies: faiss-cpu, numpy
System role: Durable local vector store
"""

import asyncio
import json
import logging
import os
from datetime import datetime
from pathlib import Path

import faiss
import numpy as np

from rag_engine.boundary.embeddings.base import EmbeddingProvider
from rag_engine.boundary.vdb.base import VectorStore
from rag_engine.boundary.vdb.similarity import normalize_rows
from rag_engine.core.exceptions import VectorStoreError
from rag_engine.models.document import Document

logger = logging.getLogger(__name__)

DOCSTORE_VERSION = 1


class FAISSVectorStore(VectorStore):
    """Exact inner-product FAISS index with a JSON docstore."""

    name = "faiss"

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        persist_directory: str | Path = "./data/vectors",
        index_name: str = "documents",
        similarity_threshold: float = 0.15,
    ) -> None:
        """
        Initialize FAISS store.

        Args:
            embedding_provider: Provider used for documents without vectors and for queries
            persist_directory: Directory for the index and docstore files
            index_name: Base filename of both files
            similarity_threshold: Default minimum cosine score of a hit
        """
        super().__init__(embedding_provider, similarity_threshold)
        self._dir = Path(persist_directory)
        self._index_path = self._dir / f"{index_name}.faiss"
        self._docstore_path = self._dir / f"{index_name}.json"

        self._index: faiss.Index | None = None
        self._documents: dict[str, Document] = {}
        self._int_ids: dict[str, int] = {}
        self._next_id = 0

    @property
    def dimension(self) -> int | None:
        return self._index.d if self._index is not None else None

    async def _load(self) -> None:
        await asyncio.to_thread(self._load_sync)

    def _load_sync(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        if not (self._index_path.exists() and self._docstore_path.exists()):
            logger.info(f"{__name__}:_load - No index at {self._index_path}, starting empty")
            return

        try:
            index = faiss.read_index(str(self._index_path))
            payload = json.loads(self._docstore_path.read_text(encoding="utf-8"))
            records = [
                (Document.model_validate(entry["document"]), int(entry["faiss_id"]))
                for entry in payload["documents"]
            ]
        except (RuntimeError, OSError, ValueError, KeyError) as e:
            raise VectorStoreError(
                f"Failed to load FAISS index: {e}",
                "initialize",
                {"path": str(self._index_path)},
            ) from e

        self._index = index
        self._documents = {doc.id: doc for doc, _ in records}
        self._int_ids = {doc.id: faiss_id for doc, faiss_id in records}
        self._next_id = int(payload.get("next_id", len(records)))
        if payload.get("last_updated"):
            self._last_updated = datetime.fromisoformat(payload["last_updated"])
        logger.info(f"{__name__}:_load - Loaded {len(self._documents)} documents from {self._index_path}")

    async def _upsert(self, documents: list[Document]) -> None:
        batch = list({doc.id: doc for doc in documents}.values())
        vectors = normalize_rows(np.asarray([doc.embedding for doc in batch], dtype=np.float32))
        if self._index is None:
            self._index = faiss.IndexIDMap2(faiss.IndexFlatIP(vectors.shape[1]))

        stale = [self._int_ids[doc.id] for doc in batch if doc.id in self._int_ids]
        if stale:
            self._index.remove_ids(np.asarray(stale, dtype=np.int64))

        ids = []
        for doc in batch:
            self._int_ids[doc.id] = self._next_id
            self._documents[doc.id] = doc
            ids.append(self._next_id)
            self._next_id += 1
        self._index.add_with_ids(vectors, np.asarray(ids, dtype=np.int64))

    async def _score(self, vector: list[float]) -> list[tuple[Document, float]]:
        if self._index is None or self._index.ntotal == 0:
            return []
        query = normalize_rows(np.asarray([vector], dtype=np.float32))
        scores, ids = self._index.search(query, self._index.ntotal)
        by_id = {int(i): float(s) for s, i in zip(scores[0], ids[0]) if i != -1}
        return [
            (doc, by_id.get(self._int_ids[doc.id], 0.0))
            for doc in self._documents.values()
        ]

    async def _delete(self, ids: list[str]) -> int:
        doomed = [doc_id for doc_id in dict.fromkeys(ids) if doc_id in self._documents]
        if not doomed:
            return 0
        faiss_ids = [self._int_ids.pop(doc_id) for doc_id in doomed]
        for doc_id in doomed:
            del self._documents[doc_id]
        self._index.remove_ids(np.asarray(faiss_ids, dtype=np.int64))
        return len(doomed)

    async def _get(self, ids: list[str]) -> list[Document]:
        return [self._documents[doc_id] for doc_id in ids if doc_id in self._documents]

    async def _all(self) -> list[Document]:
        return list(self._documents.values())

    async def _clear(self) -> None:
        self._index = None
        self._documents = {}
        self._int_ids = {}
        self._next_id = 0

    async def _persist(self) -> None:
        await asyncio.to_thread(self._persist_sync)

    def _persist_sync(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        if self._index is None:
            self._index_path.unlink(missing_ok=True)
            self._docstore_path.unlink(missing_ok=True)
            return

        payload = {
            "version": DOCSTORE_VERSION,
            "next_id": self._next_id,
            "last_updated": self._last_updated.isoformat() if self._last_updated else None,
            "documents": [
                {"faiss_id": self._int_ids[doc.id], "document": doc.model_dump(mode="json")}
                for doc in self._documents.values()
            ],
        }
        try:
            tmp_index = self._index_path.with_name(self._index_path.name + ".tmp")
            faiss.write_index(self._index, str(tmp_index))
            os.replace(tmp_index, self._index_path)

            tmp_docstore = self._docstore_path.with_name(self._docstore_path.name + ".tmp")
            tmp_docstore.write_text(json.dumps(payload), encoding="utf-8")
            os.replace(tmp_docstore, self._docstore_path)
        except (RuntimeError, OSError) as e:
            raise VectorStoreError(
                f"Failed to persist FAISS index: {e}",
                "persist",
                {"path": str(self._index_path)},
            ) from e
