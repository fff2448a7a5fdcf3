"""
PDF processor using LangChain PyPDFLoader.

Each page is chunked separately so chunks carry their 1-based page number.

Dependencies: langchain_community.document_loaders, pypdf
System role: PDF extraction
"""

import asyncio
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader

from rag_engine.core.document_processing.base import (
    DocumentProcessor,
    ExtractedContent,
    ExtractedSection,
)
from rag_engine.core.exceptions import ExtractionError


class PDFProcessor(DocumentProcessor):
    """Processor for PDF files."""

    name = "pdf"
    extensions = (".pdf",)

    async def extract(self, path: Path) -> ExtractedContent:
        try:
            pages = await asyncio.to_thread(PyPDFLoader(str(path)).load)
        except Exception as e:
            raise ExtractionError(f"Failed to parse PDF: {e}", str(path), "pdf") from e

        sections = []
        for position, page in enumerate(pages):
            if not page.page_content.strip():
                continue
            number = page.metadata.get("page", position)
            sections.append(ExtractedSection(page.page_content, page=int(number) + 1))

        if not sections:
            raise ExtractionError("PDF document contains no extractable text", str(path), "pdf")

        info = pages[0].metadata
        return ExtractedContent(
            sections=sections,
            title=(info.get("title") or "").strip() or None,
            author=(info.get("author") or "").strip() or None,
            extra={"page_count": info.get("total_pages", len(pages))},
        )
