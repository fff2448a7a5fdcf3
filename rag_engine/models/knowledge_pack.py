"""
Knowledge pack and engine statistics models.

Dependencies: pydantic
System role: Named document collections and engine status
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from rag_engine.models.document import Document
from rag_engine.models.search import VectorStoreStats


class KnowledgePack(BaseModel):
    """Named collection of documents; packs reference documents, they do not own them."""

    id: str
    name: str
    description: str = ""
    path: str
    documents: list[Document] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def document_ids(self) -> list[str]:
        return [doc.id for doc in self.documents]


class RAGStats(BaseModel):
    """Engine-wide statistics."""

    vector_store: VectorStoreStats
    knowledge_packs: int = 0
    cached_embeddings: int = 0
    memory_usage_bytes: int = 0
    memory_limit_bytes: int = 0
    last_cleanup: datetime | None = None
