"""
Shared test fixtures and configuration for entire test suite.

Provides: settings pointed at temporary directories, fake model providers,
an initialized in-memory store and a RAGManager wired to the fakes.
Dependencies: pytest, pytest-asyncio
System role: Test infrastructure and fixture management
"""

from pathlib import Path

import pytest

from fakes import FakeEmbeddingProvider, FakeTextProvider
from rag_engine.boundary.vdb.memory_store import InMemoryVectorStore
from rag_engine.configs import OllamaSettings, RAGSettings, Settings, VectorStoreSettings
from rag_engine.core.rag_manager import RAGManager
from rag_engine.core.resource_tracker import ResourceTracker


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with small chunks, no batch pause and temp directories."""
    return Settings(
        ollama=OllamaSettings(base_url="http://ollama.test"),
        rag=RAGSettings(
            chunk_size=200,
            chunk_overlap=40,
            batch_pause_ms=0,
            knowledge_base_dir=tmp_path / "packs",
        ),
        vector_store=VectorStoreSettings(
            store_type="memory",
            persist_directory=tmp_path / "vectors",
        ),
    )


@pytest.fixture
def fake_embeddings() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def fake_generator() -> FakeTextProvider:
    return FakeTextProvider()


@pytest.fixture
async def memory_store(fake_embeddings: FakeEmbeddingProvider) -> InMemoryVectorStore:
    """Initialized in-memory store backed by the fake embedder."""
    store = InMemoryVectorStore(fake_embeddings, similarity_threshold=0.15)
    await store.initialize()
    return store


@pytest.fixture
async def manager(
    settings: Settings,
    fake_embeddings: FakeEmbeddingProvider,
    fake_generator: FakeTextProvider,
    memory_store: InMemoryVectorStore,
) -> RAGManager:
    """Initialized RAGManager wired to the fakes."""
    rag = RAGManager(
        settings=settings,
        embedding_provider=fake_embeddings,
        vector_store=memory_store,
        text_provider=fake_generator,
        resource_tracker=ResourceTracker(memory_limit_mb=16, cleanup_interval_seconds=3600),
    )
    await rag.initialize()
    return rag
