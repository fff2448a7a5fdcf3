"""
Processor registry.

Maps file extensions to processors and dispatches files to the first
processor that accepts them.

Dependencies: rag_engine.core.document_processing processors
System role: Format dispatch for ingestion
"""

import logging
from pathlib import Path
from typing import Any

from rag_engine.core.chunker import Chunker
from rag_engine.core.document_processing.base import DocumentProcessor
from rag_engine.core.document_processing.docx_processor import DocxProcessor
from rag_engine.core.document_processing.pdf_processor import PDFProcessor
from rag_engine.core.document_processing.text_processor import TextProcessor
from rag_engine.core.exceptions import UnsupportedFormatError
from rag_engine.models.document import Document

logger = logging.getLogger(__name__)


class ProcessorRegistry:
    """Registry of document processors."""

    def __init__(
        self,
        chunker: Chunker | None = None,
        language: str = "en",
        tags: list[str] | None = None,
        register_defaults: bool = True,
    ) -> None:
        """
        Initialize registry.

        Args:
            chunker: Chunker shared by the default processors
            language: Language stamped by the default processors
            tags: Tags added by the default processors
            register_defaults: Register PDF, text and DOCX processors
        """
        self._processors: list[DocumentProcessor] = []
        if register_defaults:
            for processor_cls in (PDFProcessor, TextProcessor, DocxProcessor):
                self.register(processor_cls(chunker=chunker, language=language, tags=tags))

    def register(self, processor: DocumentProcessor) -> None:
        """Add a processor; earlier registrations win for shared extensions."""
        self._processors.append(processor)
        logger.debug(
            f"{__name__}:register - Registered processor {processor.name} "
            f"for {', '.join(processor.extensions)}"
        )

    def get_processor(self, file_path: str | Path) -> DocumentProcessor | None:
        """Return the processor handling a file, or None."""
        for processor in self._processors:
            if processor.can_process(file_path):
                return processor
        return None

    async def process_file(
        self,
        file_path: str | Path,
        metadata: dict[str, Any] | None = None,
    ) -> list[Document]:
        """
        Process a file with the matching processor.

        Raises:
            UnsupportedFormatError: When no processor handles the extension
            ExtractionError: When the processor fails
        """
        processor = self.get_processor(file_path)
        if processor is None:
            raise UnsupportedFormatError(str(file_path), Path(file_path).suffix.lower())
        return await processor.process(file_path, metadata)

    def get_supported_extensions(self) -> list[str]:
        """Sorted union of all registered extensions."""
        return sorted({ext for processor in self._processors for ext in processor.extensions})

    def list_processors(self) -> list[dict[str, Any]]:
        """Registered processors with their extensions."""
        return [
            {"name": processor.name, "extensions": list(processor.extensions)}
            for processor in self._processors
        ]
