"""
Knowledge pack registry.

A knowledge pack is a named, described collection of indexed documents.
Packs hold references to stored documents; dropping a pack leaves the
documents in the vector store.

Dependencies: rag_engine.models
System role: Named document collections for scoped retrieval
"""

import logging
import uuid
from pathlib import Path
from typing import Any

from rag_engine.core.exceptions import KnowledgePackNotFoundError, ValidationError
from rag_engine.models.document import Document
from rag_engine.models.knowledge_pack import KnowledgePack

logger = logging.getLogger(__name__)


class KnowledgePackRegistry:
    """In-process registry of knowledge packs keyed by name."""

    def __init__(self, base_dir: str | Path = "./knowledge_packs") -> None:
        self._base_dir = Path(base_dir)
        self._packs: dict[str, KnowledgePack] = {}

    def __len__(self) -> int:
        return len(self._packs)

    def __contains__(self, name: str) -> bool:
        return name in self._packs

    def create(
        self,
        name: str,
        description: str = "",
        path: str | None = None,
        metadata: dict[str, Any] | None = None,
        exist_ok: bool = False,
    ) -> KnowledgePack:
        """
        Register a new pack.

        Args:
            name: Unique pack name
            description: Free-form description
            path: Source location; defaults to <base_dir>/<name>
            metadata: Arbitrary pack metadata
            exist_ok: Return the existing pack (description and metadata
                updated) instead of failing on a duplicate name

        Raises:
            ValidationError: When the name is blank or already taken
        """
        if not name or not name.strip():
            raise ValidationError("Knowledge pack name must not be empty", "name")

        existing = self._packs.get(name)
        if existing is not None:
            if not exist_ok:
                raise ValidationError(f"Knowledge pack already exists: {name}", "name")
            if description:
                existing.description = description
            if metadata:
                existing.metadata.update(metadata)
            return existing

        pack = KnowledgePack(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            path=path or str(self._base_dir / name),
            metadata=dict(metadata or {}),
        )
        self._packs[name] = pack
        logger.info(f"{__name__}:create - Created knowledge pack {name}")
        return pack

    def get(self, name: str) -> KnowledgePack | None:
        return self._packs.get(name)

    def require(self, name: str) -> KnowledgePack:
        pack = self._packs.get(name)
        if pack is None:
            raise KnowledgePackNotFoundError(name)
        return pack

    def list_names(self) -> list[str]:
        return list(self._packs)

    def list_packs(self) -> list[KnowledgePack]:
        return list(self._packs.values())

    def add_documents(
        self,
        name: str,
        documents: list[Document],
        **create_kwargs: Any,
    ) -> KnowledgePack:
        """Attach documents to a pack, creating it when missing; ids are unique per pack."""
        pack = self._packs.get(name) or self.create(name, **create_kwargs)
        merged = {doc.id: doc for doc in pack.documents}
        for doc in documents:
            merged[doc.id] = doc
        pack.documents = list(merged.values())
        return pack

    def remove_document_ids(self, ids: list[str]) -> int:
        """Detach ids from every pack; returns the number of references removed."""
        doomed = set(ids)
        removed = 0
        for pack in self._packs.values():
            kept = [doc for doc in pack.documents if doc.id not in doomed]
            removed += len(pack.documents) - len(kept)
            pack.documents = kept
        return removed

    def drop(self, name: str) -> KnowledgePack:
        pack = self.require(name)
        del self._packs[name]
        logger.info(f"{__name__}:drop - Dropped knowledge pack {name}")
        return pack

    def clear_documents(self) -> None:
        for pack in self._packs.values():
            pack.documents = []
