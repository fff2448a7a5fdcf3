"""
RAG manager.

Orchestrates the pipeline end to end: file discovery and format dispatch,
batched embedding through the cache-backed provider, persistence into the
vector store, knowledge pack bookkeeping, retrieval and context-grounded
answer generation.

Dependencies: rag_engine.boundary, rag_engine.core, rag_engine.configs
System role: Entry point of the engine
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rag_engine.boundary.embeddings.base import EmbeddingProvider
from rag_engine.boundary.embeddings.ollama_embeddings import OllamaEmbeddingProvider
from rag_engine.boundary.llm.base import TextGenerationProvider
from rag_engine.boundary.llm.ollama_provider import OllamaTextGenerationProvider
from rag_engine.boundary.vdb.base import VectorStore
from rag_engine.boundary.vdb.vector_store_factory import get_vector_store
from rag_engine.configs import Settings, get_settings
from rag_engine.core.answer_prompt import (
    NO_RESULTS_ANSWER,
    build_context,
    build_messages,
    generation_failed_answer,
)
from rag_engine.core.chunker import Chunker, ChunkingOptions
from rag_engine.core.document_processing.processor_registry import ProcessorRegistry
from rag_engine.core.exceptions import (
    DocumentProcessingError,
    GenerationError,
    UnsupportedFormatError,
    ValidationError,
    VectorStoreNotInitializedError,
)
from rag_engine.core.knowledge_packs import KnowledgePackRegistry
from rag_engine.core.resource_tracker import ResourceTracker
from rag_engine.models.answer import AnswerMetadata, AnswerOptions, AnswerResult
from rag_engine.models.document import Document, DocumentMetadata
from rag_engine.models.embedding import ModelInfo
from rag_engine.models.generation import GenerationRequest
from rag_engine.models.indexing import (
    FileIndexingResult,
    FileStatus,
    IndexingJob,
    IndexingProgress,
    JobStatus,
)
from rag_engine.models.knowledge_pack import KnowledgePack, RAGStats
from rag_engine.models.search import SearchQuery, SearchResult
from rag_engine.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[IndexingProgress], Awaitable[None] | None]

# Pack name used when neither the caller nor the directory provides one
DEFAULT_PACK_NAME = "default"


class RAGManager:
    """
    Retrieval-augmented generation orchestrator.

    Every collaborator can be injected; missing ones are built from settings.
    The manager owns the ResourceTracker, so the embedding cache and memory
    counter live and die with it.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        embedding_provider: EmbeddingProvider | None = None,
        vector_store: VectorStore | None = None,
        text_provider: TextGenerationProvider | None = None,
        processor_registry: ProcessorRegistry | None = None,
        resource_tracker: ResourceTracker | None = None,
        knowledge_packs: KnowledgePackRegistry | None = None,
    ) -> None:
        """
        Initialize manager.

        Args:
            settings: Engine settings; application settings when None
            embedding_provider: Embedding service client
            vector_store: Vector store backend (uninitialized is fine)
            text_provider: Text generation client
            processor_registry: Format processors
            resource_tracker: Embedding cache and memory accounting
            knowledge_packs: Knowledge pack registry
        """
        self._settings = settings or get_settings()
        rag = self._settings.rag

        self._tracker = resource_tracker or ResourceTracker(
            memory_limit_mb=rag.memory_limit_mb,
            cleanup_interval_seconds=rag.cleanup_interval_seconds,
        )
        self._embeddings = embedding_provider or OllamaEmbeddingProvider(
            self._settings.ollama,
            cache=self._tracker if rag.cache_embeddings else None,
        )
        self._store = vector_store or get_vector_store(self._embeddings, self._settings.vector_store)
        self._generator = text_provider or OllamaTextGenerationProvider(self._settings.ollama)
        self._chunker = Chunker(
            ChunkingOptions(
                chunk_size=rag.chunk_size,
                chunk_overlap=rag.chunk_overlap,
                separator=rag.separator,
                strategy=rag.chunk_strategy,
            )
        )
        self._registry = processor_registry or ProcessorRegistry(
            chunker=self._chunker,
            language=rag.language,
            tags=rag.tags,
        )
        self._packs = knowledge_packs or KnowledgePackRegistry(rag.knowledge_base_dir)

    async def __aenter__(self) -> "RAGManager":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def vector_store(self) -> VectorStore:
        return self._store

    @property
    def resource_tracker(self) -> ResourceTracker:
        return self._tracker

    async def initialize(self) -> None:
        """Initialize the vector store and probe the model services."""
        logger.info(f"{__name__}:initialize - START: store={self._store.name}")
        await self._store.initialize()

        if not await self._embeddings.is_available():
            logger.warning(
                f"{__name__}:initialize - Embedding model {self._embeddings.model} unavailable; "
                "indexing will fail until it is pulled"
            )
        if not await self._generator.is_available():
            logger.warning(f"{__name__}:initialize - Text generation model unavailable")
        logger.info(f"{__name__}:initialize - SUCCESS")

    async def close(self) -> None:
        await self._store.close()
        await self._embeddings.aclose()
        await self._generator.aclose()

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    async def index_directory(
        self,
        directory: str | Path,
        metadata: dict[str, Any] | None = None,
        progress_callback: ProgressCallback | None = None,
        knowledge_pack: str | None = None,
    ) -> KnowledgePack:
        """
        Index every non-hidden file under a directory.

        Unsupported and unreadable files are recorded in the job report and
        do not stop the job. Documents are embedded in batches and persisted
        with a single store write.

        Args:
            directory: Root directory, searched recursively
            metadata: Metadata overrides applied to every file
            progress_callback: Sync or async callable invoked after each file and
                once more after persistence with processed_documents set
            knowledge_pack: Pack receiving the documents; defaults to
                metadata['title'] or the directory name

        Returns:
            KnowledgePack: Pack holding the stored documents, with the job
                report under metadata['job']

        Raises:
            ValidationError: When directory is not a directory
            VectorStoreNotInitializedError: When initialize() was not awaited
        """
        root = Path(directory)
        if not root.is_dir():
            raise ValidationError(f"Not a directory: {root}", "directory")
        self._require_store("index_directory")

        files = self._discover_files(root)
        job = IndexingJob(root=str(root))
        progress = IndexingProgress(total_files=len(files))
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:index_directory - START: {len(files)} files under {root}",
            root=str(root),
            total_files=len(files),
        )

        collected: list[Document] = []
        for position, file_path in enumerate(files):
            job.status = JobStatus.PROCESSING_FILE
            job.current_file_index = position
            progress.current_file = str(file_path)
            progress.error = None

            try:
                documents = await self._registry.process_file(file_path, metadata)
            except UnsupportedFormatError as e:
                logger.info(f"{__name__}:index_directory - Skipping unsupported file {file_path}")
                job.files.append(self._failed_entry(file_path, FileStatus.UNSUPPORTED, e))
                progress.error = e.message
            except DocumentProcessingError as e:
                log_exception_with_context(
                    logger,
                    f"{__name__}:index_directory - Failed to process {file_path}",
                    e,
                    level=logging.WARNING,
                    file_path=str(file_path),
                )
                job.files.append(self._failed_entry(file_path, FileStatus.FAILED, e))
                progress.error = e.message
            else:
                job.files.append(
                    FileIndexingResult(
                        path=str(file_path),
                        status=FileStatus.OK,
                        document_count=len(documents),
                    )
                )
                collected.extend(documents)
                progress.total_documents += len(documents)

            progress.processed_files += 1
            await self._notify(progress_callback, progress)

        stored = await self._embed_and_store(collected, job)
        progress.processed_documents = len(collected)
        progress.current_file = None
        progress.error = None
        await self._notify(progress_callback, progress)

        job.documents_embedded = len(stored)
        job.documents_dropped = len(collected) - len(stored)
        job.status = JobStatus.DONE if not job.failed_files and not job.documents_dropped else JobStatus.PARTIAL
        job.finished_at = datetime.now(timezone.utc)

        pack_name = (
            knowledge_pack
            or (metadata or {}).get("title")
            or root.resolve().name
            or DEFAULT_PACK_NAME
        )
        pack = self._packs.add_documents(
            pack_name,
            stored,
            description=(metadata or {}).get("description", ""),
            path=str(root),
        )
        pack.metadata["job"] = job.report()

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:index_directory - {job.status.value.upper()}: {len(stored)} documents "
            f"from {len(files)} files into pack {pack_name}",
            pack=pack_name,
            failed_files=len(job.failed_files),
            dropped=job.documents_dropped,
        )
        return pack

    async def index_file(
        self,
        file_path: str | Path,
        metadata: dict[str, Any] | None = None,
        knowledge_pack: str | None = None,
    ) -> list[Document]:
        """
        Index a single file.

        Returns:
            list[Document]: Stored documents

        Raises:
            UnsupportedFormatError: When no processor handles the file
            ExtractionError: When the file cannot be parsed
            VectorStoreNotInitializedError: When initialize() was not awaited
        """
        self._require_store("index_file")
        documents = await self._registry.process_file(file_path, metadata)
        stored = await self._embed_and_store(documents)
        if knowledge_pack:
            self._packs.add_documents(knowledge_pack, stored)
        logger.info(f"{__name__}:index_file - Indexed {file_path}: {len(stored)}/{len(documents)} chunks stored")
        return stored

    async def index_text(
        self,
        content: str,
        metadata: dict[str, Any] | None = None,
        knowledge_pack: str | None = None,
    ) -> list[Document]:
        """
        Chunk, embed and store raw text.

        Args:
            content: Text to index
            metadata: Document metadata; 'source' defaults to 'inline'
            knowledge_pack: Optional pack receiving the documents

        Returns:
            list[Document]: Stored documents
        """
        self._require_store("index_text")
        rag = self._settings.rag
        base = {"source": "inline", "language": rag.language, **(metadata or {})}
        base["tags"] = [*rag.tags, *base.get("tags", [])]

        documents = [
            Document(content=chunk, metadata=DocumentMetadata(**chunk_metadata))
            for chunk, chunk_metadata in self._chunker.chunk_with_metadata(content, base)
        ]
        stored = await self._embed_and_store(documents)
        if knowledge_pack:
            self._packs.add_documents(knowledge_pack, stored)
        return stored

    async def _embed_and_store(
        self,
        documents: list[Document],
        job: IndexingJob | None = None,
    ) -> list[Document]:
        """Embed in paused batches, drop failures, persist once."""
        if not documents:
            return []

        rag = self._settings.rag
        pause = rag.batch_pause_ms / 1000
        embedded: list[Document] = []

        for batch_index, start in enumerate(range(0, len(documents), rag.batch_size)):
            batch = documents[start:start + rag.batch_size]
            if job is not None:
                job.status = JobStatus.EMBEDDING_BATCH
                job.current_batch_index = batch_index

            pending = [doc for doc in batch if doc.embedding is None]
            result = await self._embeddings.embed_many([doc.content for doc in pending])
            vectors = dict(zip((doc.id for doc in pending), result.embeddings))

            for doc in batch:
                if doc.embedding is not None:
                    embedded.append(doc)
                    continue
                vector = vectors[doc.id]
                if vector is None:
                    logger.warning(
                        f"{__name__}:_embed_and_store - Dropping chunk {doc.metadata.chunk_index} "
                        f"of {doc.metadata.source}: embedding failed"
                    )
                    continue
                embedded.append(doc.model_copy(update={"embedding": vector}))

            self._tracker.maybe_cleanup()
            if pause and start + rag.batch_size < len(documents):
                await asyncio.sleep(pause)

        stored = await self._store.add_documents(embedded) if embedded else []
        if job is not None:
            job.status = JobStatus.PERSISTED
        return stored

    def _require_store(self, operation: str) -> None:
        if not self._store.is_initialized:
            raise VectorStoreNotInitializedError(operation, {"store": self._store.name})

    @staticmethod
    def _discover_files(root: Path) -> list[Path]:
        return sorted(
            path
            for path in root.rglob("*")
            if path.is_file()
            and not any(part.startswith(".") for part in path.relative_to(root).parts)
        )

    @staticmethod
    def _failed_entry(path: Path, status: FileStatus, error: DocumentProcessingError) -> FileIndexingResult:
        return FileIndexingResult(
            path=str(path),
            status=status,
            error_type=type(error).__name__,
            error=error.message,
        )

    @staticmethod
    async def _notify(callback: ProgressCallback | None, progress: IndexingProgress) -> None:
        if callback is None:
            return
        outcome = callback(progress.model_copy())
        if inspect.isawaitable(outcome):
            await outcome

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str | SearchQuery,
        k: int | None = None,
        filters: dict[str, Any] | None = None,
        threshold: float | None = None,
        knowledge_pack: str | None = None,
    ) -> list[SearchResult]:
        """
        Similarity search over stored documents.

        Args:
            query: Query text or a prepared SearchQuery
            k: Result count when query is text; settings default when None
            filters: Exact-match metadata filters when query is text
            threshold: Minimum score when query is text; store default when None
            knowledge_pack: Restrict candidates to this pack's documents

        Raises:
            ValidationError: When the query text is blank
            KnowledgePackNotFoundError: When knowledge_pack is unknown
            EmbeddingError: When the query cannot be embedded
        """
        if isinstance(query, str):
            query = SearchQuery(
                query=query,
                k=k or self._settings.rag.max_search_results,
                filters=filters,
                threshold=threshold,
            )
        if not query.query.strip():
            raise ValidationError("Search query must not be empty", "query")

        if knowledge_pack:
            pack = self._packs.require(knowledge_pack)
            query = query.model_copy(update={"document_ids": pack.document_ids})

        results = await self._store.search(query)
        logger.info(f"{__name__}:search - {len(results)} results for query_len={len(query.query)}")
        return results

    async def search_with_filters(
        self,
        query: str,
        filters: dict[str, Any],
        k: int = 10,
    ) -> list[SearchResult]:
        return await self.search(query, k=k, filters=filters)

    async def search_and_answer(
        self,
        query: str,
        options: AnswerOptions | None = None,
    ) -> AnswerResult:
        """
        Retrieve context and generate an answer grounded in it.

        With no results the generator is not called and a fixed
        "no relevant information" answer is returned. A generation failure
        yields an error answer that still carries the search results.

        Args:
            query: Question text
            options: Retrieval and generation options

        Returns:
            AnswerResult: Results, answer text and timing metadata
        """
        options = options or AnswerOptions()
        ollama = self._settings.ollama

        started = time.perf_counter()
        results = await self.search(
            query,
            k=options.k,
            filters=options.filters,
            threshold=options.threshold,
            knowledge_pack=options.knowledge_pack,
        )
        metadata = AnswerMetadata(query=query, search_time_ms=(time.perf_counter() - started) * 1000)

        if not results:
            logger.info(f"{__name__}:search_and_answer - No relevant documents, skipping generation")
            return self._finish_answer(results, NO_RESULTS_ANSWER, metadata)

        context = build_context(results, self._settings.rag.max_context_chars)
        request = GenerationRequest(
            messages=build_messages(query, context, options.style, options.language),
            temperature=ollama.temperature if options.temperature is None else options.temperature,
            max_tokens=options.max_tokens or ollama.max_tokens,
        )

        started = time.perf_counter()
        try:
            response = await self._generator.generate(request)
        except GenerationError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:search_and_answer - Generation failed",
                e,
                level=logging.WARNING,
                results=len(results),
            )
            answer = generation_failed_answer(len(results), e.message)
            metadata.error = str(e)
        else:
            answer = response.content.strip()
            metadata.token_estimate = response.tokens_used
        metadata.generation_time_ms = (time.perf_counter() - started) * 1000

        return self._finish_answer(results, answer, metadata)

    def _finish_answer(
        self,
        results: list[SearchResult],
        answer: str,
        metadata: AnswerMetadata,
    ) -> AnswerResult:
        metadata.memory_usage_bytes = self._tracker.memory_usage_bytes
        self._tracker.maybe_cleanup()
        return AnswerResult(search_results=results, answer=answer, metadata=metadata)

    # ------------------------------------------------------------------
    # Knowledge packs
    # ------------------------------------------------------------------

    async def create_knowledge_pack(
        self,
        name: str,
        description: str = "",
        documents: list[Document] | None = None,
        path: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> KnowledgePack:
        """
        Create a pack, storing any supplied documents.

        Raises:
            ValidationError: When the name is blank or already taken
        """
        self._require_store("create_knowledge_pack")
        pack = self._packs.create(name, description=description, path=path, metadata=metadata)
        if documents:
            stored = await self._embed_and_store(documents)
            self._packs.add_documents(name, stored)
        return pack

    async def add_to_knowledge_pack(self, name: str, documents: list[Document]) -> KnowledgePack:
        """Store documents and attach them to a pack, creating the pack if needed."""
        self._require_store("add_to_knowledge_pack")
        stored = await self._embed_and_store(documents)
        return self._packs.add_documents(name, stored)

    def update_knowledge_pack(
        self,
        name: str,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> KnowledgePack:
        pack = self._packs.require(name)
        if description is not None:
            pack.description = description
        if metadata:
            pack.metadata.update(metadata)
        return pack

    def get_knowledge_pack(self, name: str) -> KnowledgePack | None:
        return self._packs.get(name)

    def list_knowledge_packs(self) -> list[str]:
        return self._packs.list_names()

    async def delete_knowledge_pack(self, name: str, delete_documents: bool = False) -> KnowledgePack:
        """
        Drop a pack.

        Args:
            name: Pack name
            delete_documents: Also delete the pack's documents from the store

        Raises:
            KnowledgePackNotFoundError: When the pack does not exist
        """
        pack = self._packs.drop(name)
        if delete_documents and pack.documents:
            await self.delete_documents(pack.document_ids)
        return pack

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def delete_documents(self, ids: list[str]) -> int:
        removed = await self._store.delete_documents(ids)
        self._packs.remove_document_ids(ids)
        return removed

    async def get_stats(self) -> RAGStats:
        store_stats = await self._store.get_stats()
        return RAGStats(
            vector_store=store_stats,
            knowledge_packs=len(self._packs),
            cached_embeddings=len(self._tracker),
            memory_usage_bytes=self._tracker.memory_usage_bytes,
            memory_limit_bytes=self._tracker.memory_limit_bytes,
            last_cleanup=self._tracker.last_cleanup,
        )

    async def clear(self) -> None:
        """Empty the store, the packs' document lists and the embedding cache."""
        await self._store.clear()
        self._packs.clear_documents()
        self._tracker.cleanup()

    def get_supported_extensions(self) -> list[str]:
        return self._registry.get_supported_extensions()

    def list_processors(self) -> list[dict[str, Any]]:
        return self._registry.list_processors()

    async def is_embedding_provider_available(self) -> bool:
        return await self._embeddings.is_available()

    async def get_embedding_provider_info(self) -> ModelInfo:
        return await self._embeddings.model_info()

    def clear_cache(self) -> int:
        return self._tracker.cleanup()

    def set_memory_limit(self, memory_limit_mb: int) -> None:
        self._tracker.set_memory_limit(memory_limit_mb)
