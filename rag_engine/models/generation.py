"""
Text generation domain models.

Request/response schemas for the chat completion service.

Dependencies: pydantic
System role: Text generation contracts
"""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """Single chat message."""

    role: Literal["system", "user", "assistant"] = Field(description="Message role")
    content: str = Field(description="Message content")


class GenerationRequest(BaseModel):
    """Chat completion request."""

    model: str | None = Field(default=None, description="Model override; provider default when unset")
    messages: list[ChatMessage]
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=800, ge=1)


class GenerationResponse(BaseModel):
    """Chat completion response."""

    content: str
    tokens_used: int = 0
    model: str
