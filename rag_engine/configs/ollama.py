"""
Ollama server configuration settings.

Endpoints, model names and timeouts for the embedding and text-generation
services exposed by a local Ollama server.

Dependencies: pydantic, pydantic_settings
System role: Model server configuration for embedding and answer generation
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OllamaSettings(BaseSettings):
    """Ollama HTTP API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OLLAMA_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the Ollama server",
    )
    embedding_model: str = Field(
        default="nomic-embed-text",
        description="Model used for /api/embeddings",
    )
    text_model: str = Field(
        default="qwen2.5:7b",
        description="Model used for /api/chat answer generation",
    )
    embedding_dimension: int = Field(
        default=384,
        description="Expected embedding dimension until the server reports the real one",
    )
    max_tokens_default: int = Field(
        default=8192,
        description="Context length assumed when /api/show does not report one",
    )

    availability_timeout: float = Field(default=5.0, description="Timeout for /api/tags probes (s)")
    embedding_timeout: float = Field(default=15.0, description="Timeout per embedding request (s)")
    generation_timeout: float = Field(default=180.0, description="Timeout per chat request (s)")
    pull_timeout: float = Field(default=600.0, description="Timeout for model pulls (s)")

    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Default sampling temperature")
    max_tokens: int = Field(default=800, ge=1, description="Default maximum tokens per answer")
