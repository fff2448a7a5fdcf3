"""
Text chunking with overlap.

Splits extracted text into size-bounded chunks. Separator, paragraph and
sentence strategies accumulate atomic units greedily and seed each new
chunk with the tail of the previous one; the recursive strategy defers to
LangChain's RecursiveCharacterTextSplitter.

Dependencies: langchain_text_splitters, pydantic
System role: Second stage of the ingestion pipeline
"""

import re
from enum import Enum
from typing import Any

from langchain_text_splitters import RecursiveCharacterTextSplitter
from pydantic import BaseModel, Field, model_validator

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s*(?=[A-Z])")

# The overlap tail is snapped to a sentence or line end only when that
# boundary lies past this fraction of the overlap window.
OVERLAP_SNAP_RATIO = 0.3


class ChunkStrategy(str, Enum):
    """How text is cut into atomic units before accumulation."""

    SEPARATOR = "separator"
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"
    RECURSIVE = "recursive"


class ChunkingOptions(BaseModel):
    """Chunker configuration."""

    chunk_size: int = Field(default=1000, ge=1, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=200, ge=0, description="Characters carried into the next chunk")
    separator: str = Field(default="\n", min_length=1, description="Unit separator for the separator strategy")
    strategy: ChunkStrategy = Field(default=ChunkStrategy.SEPARATOR)

    @model_validator(mode="after")
    def _check_overlap(self) -> "ChunkingOptions":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


class Chunker:
    """Split text into overlapping chunks."""

    def __init__(self, options: ChunkingOptions | None = None) -> None:
        """
        Initialize chunker.

        Args:
            options: Default options used when chunk() is called without any
        """
        self._options = options or ChunkingOptions()

    @property
    def options(self) -> ChunkingOptions:
        return self._options

    def chunk(self, text: str, options: ChunkingOptions | None = None) -> list[str]:
        """
        Split text into chunks.

        A unit longer than chunk_size is emitted whole rather than cut.

        Args:
            text: Source text
            options: Per-call override of the default options

        Returns:
            list[str]: Trimmed, non-empty chunks in source order
        """
        opts = options or self._options
        if not text or not text.strip():
            return []
        if len(text) <= opts.chunk_size:
            return [text.strip()]

        if opts.strategy == ChunkStrategy.RECURSIVE:
            splitter = RecursiveCharacterTextSplitter(
                chunk_size=opts.chunk_size,
                chunk_overlap=opts.chunk_overlap,
                length_function=len,
            )
            return [piece.strip() for piece in splitter.split_text(text) if piece.strip()]

        if opts.strategy == ChunkStrategy.PARAGRAPH:
            units, joiner = PARAGRAPH_BREAK.split(text), "\n\n"
        elif opts.strategy == ChunkStrategy.SENTENCE:
            units, joiner = SENTENCE_BREAK.split(text), " "
        else:
            units, joiner = text.split(opts.separator), opts.separator

        units = [unit.strip() for unit in units if unit.strip()]
        return self._merge(units, joiner, opts)

    def chunk_with_metadata(
        self,
        text: str,
        metadata: dict[str, Any],
        options: ChunkingOptions | None = None,
    ) -> list[tuple[str, dict[str, Any]]]:
        """
        Chunk text and attach positional metadata to every chunk.

        Args:
            text: Source text
            metadata: Base metadata copied onto each chunk
            options: Per-call override of the default options

        Returns:
            list[tuple[str, dict]]: (chunk, metadata) pairs with chunk_index and total_chunks set
        """
        chunks = self.chunk(text, options)
        total = len(chunks)
        return [
            (chunk, {**metadata, "chunk_index": index, "total_chunks": total})
            for index, chunk in enumerate(chunks)
        ]

    def _merge(self, units: list[str], joiner: str, opts: ChunkingOptions) -> list[str]:
        chunks: list[str] = []
        current = ""

        for unit in units:
            candidate = f"{current}{joiner}{unit}" if current else unit
            if not current or len(candidate) <= opts.chunk_size:
                current = candidate
                continue

            chunks.append(current.strip())
            overlap = overlap_tail(current, opts.chunk_overlap)
            if overlap and len(overlap) + len(joiner) + len(unit) <= opts.chunk_size:
                current = f"{overlap}{joiner}{unit}"
            else:
                current = unit

        if current.strip():
            chunks.append(current.strip())
        return chunks


def overlap_tail(text: str, overlap: int) -> str:
    """
    Return the tail of a closed chunk that seeds the next one.

    The last ``overlap`` characters are taken; when a '.' or newline inside
    that window lies past 30% of it, the tail starts right after it. The
    window's final character is not considered a boundary, so a chunk ending
    in a period still yields an overlap.

    Args:
        text: Closed chunk
        overlap: Overlap size in characters

    Returns:
        str: Trimmed overlap text, possibly empty
    """
    if overlap <= 0:
        return ""
    if len(text) <= overlap:
        return text.strip()

    window = text[-overlap:]
    end = len(window) - 1
    boundary = max(window.rfind(".", 0, end), window.rfind("\n", 0, end))
    if boundary > overlap * OVERLAP_SNAP_RATIO:
        window = window[boundary + 1:]
    return window.strip()
