"""
Exception hierarchy for the RAG engine.

Errors carry a message plus a details dict; per-file pipeline failures
subclass DocumentProcessingError so a directory job can record and skip them.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the engine
"""

from typing import Any


class RAGEngineError(Exception):
    """
    Root of every error raised by the indexing and retrieval pipeline.

    ``details`` holds machine-readable context (file path, model, store
    operation) that directory jobs copy into their per-file report.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Args:
            message: Summary shown to the caller and stored in job reports
            details: Context such as file_path, model or operation
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(RAGEngineError):
    """Bad caller input: blank queries, non-directory paths, duplicate pack names."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            message: Error message
            field: Offending argument, e.g. "query" or "directory"
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DocumentProcessingError(RAGEngineError):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            file_path: Path of the file that failed
            details: Additional context
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        self.file_path = file_path
        super().__init__(message, details)


class UnsupportedFormatError(DocumentProcessingError):
    """Raised when no registered processor handles a file extension."""

    def __init__(
        self,
        file_path: str,
        extension: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize unsupported format error.

        Args:
            file_path: Path of the rejected file
            extension: Lower-cased extension that matched no processor
            details: Additional context
        """
        details = details or {}
        details["extension"] = extension
        super().__init__(f"No processor found for file type: {extension or '<none>'}", file_path, details)


class ExtractionError(DocumentProcessingError):
    """Raised when text extraction from a supported file fails."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize extraction error.

        Args:
            message: Error message
            file_path: Path of the file
            file_type: Type of file that failed parsing
            details: Additional context
        """
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, file_path, details)


class EmbeddingError(DocumentProcessingError):
    """Raised when a text cannot be embedded, e.g. a search query."""

    def __init__(self, message: str, model: str | None = None, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, None, details)


class VectorStoreError(RAGEngineError):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Store method that failed (add_documents, search, _persist...)
            details: Additional context such as the index path
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class VectorStoreNotInitializedError(VectorStoreError):
    """Raised when a store is used before initialize() completed."""

    def __init__(self, operation: str, details: dict[str, Any] | None = None) -> None:
        super().__init__("Vector store not initialized", operation, details)


class GenerationError(RAGEngineError):
    """Text-generation request failed, timed out or returned an unreadable body."""

    def __init__(self, message: str, model: str | None = None, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)


class KnowledgePackNotFoundError(RAGEngineError):
    """Raised when a knowledge pack name is not registered."""

    def __init__(self, name: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["name"] = name
        super().__init__(f"Knowledge pack not found: {name}", details)
