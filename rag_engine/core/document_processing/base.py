"""
Document processor interface.

A processor turns one file of a supported format into chunked Documents
with provenance metadata. Subclasses only extract text; chunking and
metadata assembly are shared here.

Dependencies: rag_engine.core.chunker, rag_engine.models
System role: First stage of the ingestion pipeline
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rag_engine.core.chunker import Chunker
from rag_engine.models.document import Document, DocumentMetadata

logger = logging.getLogger(__name__)

# Override keys mapped onto declared metadata fields; the rest become extra metadata
_RESERVED_KEYS = {"source", "title", "author", "page", "chunk_index", "total_chunks", "language", "tags"}


@dataclass
class ExtractedSection:
    """Text extracted from one part of a file (a page for paged formats)."""

    text: str
    page: int | None = None


@dataclass
class ExtractedContent:
    """Format-level extraction output."""

    sections: list[ExtractedSection]
    title: str | None = None
    author: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


class DocumentProcessor(ABC):
    """Base class for format processors."""

    name: str = "base"
    extensions: tuple[str, ...] = ()

    def __init__(
        self,
        chunker: Chunker | None = None,
        language: str = "en",
        tags: list[str] | None = None,
    ) -> None:
        """
        Initialize processor.

        Args:
            chunker: Chunker applied to extracted text
            language: Language stamped on produced documents
            tags: Tags added to every produced document
        """
        self._chunker = chunker or Chunker()
        self._language = language
        self._tags = list(tags or [])

    def can_process(self, file_path: str | Path) -> bool:
        """Return True when the file extension is handled (case-insensitive)."""
        return Path(file_path).suffix.lower() in self.extensions

    async def process(
        self,
        file_path: str | Path,
        metadata_overrides: dict[str, Any] | None = None,
    ) -> list[Document]:
        """
        Extract, chunk and wrap a file into Documents.

        Args:
            file_path: File to process
            metadata_overrides: Caller metadata; title/author/language/tags
                override extracted values, other keys are kept as extras

        Returns:
            list[Document]: Chunks with chunk_index/total_chunks set

        Raises:
            ExtractionError: When the file cannot be read or parsed
        """
        path = Path(file_path)
        logger.debug(f"{__name__}:process - START: processor={self.name}, file={path}")
        content = await self.extract(path)
        documents = self._build_documents(path, content, metadata_overrides or {})
        logger.info(
            f"{__name__}:process - Processed {path.name} into {len(documents)} chunks "
            f"(processor={self.name})"
        )
        return documents

    @abstractmethod
    async def extract(self, path: Path) -> ExtractedContent:
        """Extract text sections and format metadata from a file."""

    def _build_documents(
        self,
        path: Path,
        content: ExtractedContent,
        overrides: dict[str, Any],
    ) -> list[Document]:
        pieces: list[tuple[str, int | None]] = []
        for section in content.sections:
            for chunk in self._chunker.chunk(section.text):
                pieces.append((chunk, section.page))

        title = overrides.get("title") or content.title or path.stem
        author = overrides.get("author") or content.author
        language = overrides.get("language") or self._language
        extension = path.suffix.lower().lstrip(".")
        tags = [*self._tags, extension, *(overrides.get("tags") or [])]
        extra = {
            **content.extra,
            **{k: v for k, v in overrides.items() if k not in _RESERVED_KEYS},
        }

        total = len(pieces)
        documents = []
        for index, (chunk, page) in enumerate(pieces):
            metadata = DocumentMetadata(
                source=str(path),
                title=title,
                author=author,
                page=page,
                chunk_index=index,
                total_chunks=total,
                language=language,
                tags=tags,
                **extra,
            )
            documents.append(Document(content=chunk, metadata=metadata))
        return documents
