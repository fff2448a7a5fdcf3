"""
Document processing module.

Format processors and the registry dispatching files to them.
"""

from rag_engine.core.document_processing.base import (
    DocumentProcessor,
    ExtractedContent,
    ExtractedSection,
)
from rag_engine.core.document_processing.docx_processor import DocxProcessor
from rag_engine.core.document_processing.pdf_processor import PDFProcessor
from rag_engine.core.document_processing.processor_registry import ProcessorRegistry
from rag_engine.core.document_processing.text_processor import TextProcessor

__all__ = [
    "DocumentProcessor",
    "DocxProcessor",
    "ExtractedContent",
    "ExtractedSection",
    "PDFProcessor",
    "ProcessorRegistry",
    "TextProcessor",
]
