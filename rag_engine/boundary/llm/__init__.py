"""
Text generation boundary.

- TextGenerationProvider: interface used by the RAG manager
- OllamaTextGenerationProvider: /api/chat client
"""

from rag_engine.boundary.llm.base import TextGenerationProvider
from rag_engine.boundary.llm.ollama_provider import OllamaTextGenerationProvider

__all__ = ["OllamaTextGenerationProvider", "TextGenerationProvider"]
