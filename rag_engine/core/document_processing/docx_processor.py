"""
Word document processor.

Dependencies: python-docx
System role: DOCX extraction
"""

import asyncio
from pathlib import Path

import docx

from rag_engine.core.document_processing.base import (
    DocumentProcessor,
    ExtractedContent,
    ExtractedSection,
)
from rag_engine.core.exceptions import ExtractionError


def _read_docx(path: Path) -> tuple[str, str | None, str | None]:
    document = docx.Document(str(path))
    parts = [p.text.strip() for p in document.paragraphs if p.text.strip()]

    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))

    props = document.core_properties
    return "\n\n".join(parts), props.title or None, props.author or None


class DocxProcessor(DocumentProcessor):
    """Processor for .docx files (paragraphs and table rows)."""

    name = "docx"
    extensions = (".docx",)

    async def extract(self, path: Path) -> ExtractedContent:
        try:
            text, title, author = await asyncio.to_thread(_read_docx, path)
        except Exception as e:
            raise ExtractionError(f"Failed to parse DOCX: {e}", str(path), "docx") from e

        if not text.strip():
            raise ExtractionError("DOCX document contains no extractable text", str(path), "docx")
        return ExtractedContent(sections=[ExtractedSection(text)], title=title, author=author)
