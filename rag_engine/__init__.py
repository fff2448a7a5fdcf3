"""
Local retrieval-augmented generation engine.

Ingests documents, chunks and embeds them through a local Ollama server,
stores the vectors for similarity search and answers questions from
retrieved context.
"""

__version__ = "0.1.0"
