"""
Tests for domain models.

Metadata validation, extra-field lookup and job reporting.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from rag_engine.models.document import Document, DocumentMetadata
from rag_engine.models.indexing import FileIndexingResult, FileStatus, IndexingJob, JobStatus
from rag_engine.models.search import SearchQuery


class TestDocumentMetadata:
    """Chunk provenance validation."""

    def test_tags_are_deduplicated_in_order(self) -> None:
        """Should keep the first occurrence of each tag."""
        metadata = DocumentMetadata(source="a.txt", tags=["txt", "notes", "txt", "", "notes"])

        assert metadata.tags == ["txt", "notes"]

    def test_chunk_index_must_be_below_total(self) -> None:
        """Should reject chunk_index >= total_chunks."""
        with pytest.raises(ValidationError):
            DocumentMetadata(source="a.txt", chunk_index=3, total_chunks=3)

    def test_page_is_one_based(self) -> None:
        """Should reject page 0."""
        with pytest.raises(ValidationError):
            DocumentMetadata(source="a.pdf", page=0)

    def test_created_not_after_updated(self) -> None:
        """Should reject created_at later than updated_at."""
        now = datetime.now(timezone.utc)

        with pytest.raises(ValidationError):
            DocumentMetadata(source="a.txt", created_at=now, updated_at=now - timedelta(seconds=1))

    def test_extra_fields_are_kept(self) -> None:
        """Should expose caller-supplied keys through get()."""
        metadata = DocumentMetadata(source="a.txt", project="apollo")

        assert metadata.get("project") == "apollo"
        assert metadata.get("source") == "a.txt"
        assert metadata.get("missing", "fallback") == "fallback"


class TestDocument:
    """Document identity."""

    def test_ids_are_unique(self) -> None:
        """Should assign a fresh id to each document."""
        first = Document(content="x", metadata=DocumentMetadata(source="a"))
        second = Document(content="x", metadata=DocumentMetadata(source="a"))

        assert first.id != second.id
        assert first.embedding is None


class TestSearchQuery:
    """Query validation."""

    def test_k_must_be_positive(self) -> None:
        """Should reject k < 1."""
        with pytest.raises(ValidationError):
            SearchQuery(query="hello", k=0)


class TestIndexingJob:
    """Job report."""

    def test_report_counts_failures(self) -> None:
        """Should count every non-ok file as failed."""
        job = IndexingJob(root="/docs", status=JobStatus.PARTIAL)
        job.files = [
            FileIndexingResult(path="/docs/a.txt", status=FileStatus.OK, document_count=2),
            FileIndexingResult(path="/docs/b.png", status=FileStatus.UNSUPPORTED, error_type="UnsupportedFormatError"),
            FileIndexingResult(path="/docs/c.pdf", status=FileStatus.FAILED, error_type="ExtractionError"),
        ]

        report = job.report()

        assert report["status"] == "partial"
        assert report["total_files"] == 3
        assert report["failed_files"] == 2
        assert [f["status"] for f in report["files"]] == ["ok", "unsupported", "failed"]
