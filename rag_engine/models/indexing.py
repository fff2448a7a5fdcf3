"""
Indexing job models.

Progress snapshots and per-file outcomes for directory indexing.

Dependencies: pydantic
System role: Indexing job tracking contracts
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """Indexing job lifecycle."""

    QUEUED = "queued"
    PROCESSING_FILE = "processing_file"
    EMBEDDING_BATCH = "embedding_batch"
    PERSISTED = "persisted"
    DONE = "done"
    PARTIAL = "partial"


class FileStatus(str, Enum):
    """Outcome of indexing a single file."""

    OK = "ok"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


class IndexingProgress(BaseModel):
    """Snapshot handed to progress callbacks after each file."""

    total_files: int = 0
    processed_files: int = 0
    total_documents: int = 0
    processed_documents: int = 0
    current_file: str | None = None
    error: str | None = None


class FileIndexingResult(BaseModel):
    """Per-file entry of a job report."""

    path: str
    status: FileStatus
    document_count: int = 0
    error_type: str | None = None
    error: str | None = None


class IndexingJob(BaseModel):
    """Directory indexing job state."""

    root: str
    status: JobStatus = JobStatus.QUEUED
    current_file_index: int | None = Field(default=None, description="Index of the file being processed")
    current_batch_index: int | None = Field(default=None, description="Index of the batch being embedded")
    files: list[FileIndexingResult] = Field(default_factory=list)
    documents_embedded: int = 0
    documents_dropped: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    @property
    def failed_files(self) -> list[FileIndexingResult]:
        return [f for f in self.files if f.status != FileStatus.OK]

    def report(self) -> dict:
        """Job summary stored on the resulting knowledge pack."""
        return {
            "status": self.status.value,
            "total_files": len(self.files),
            "failed_files": len(self.failed_files),
            "documents_embedded": self.documents_embedded,
            "documents_dropped": self.documents_dropped,
            "files": [f.model_dump(mode="json") for f in self.files],
        }
