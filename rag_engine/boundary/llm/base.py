"""
Text generation interface.

Dependencies: rag_engine.models
System role: Contract between the engine and chat models
"""

from abc import ABC, abstractmethod

from rag_engine.models.generation import GenerationRequest, GenerationResponse


class TextGenerationProvider(ABC):
    """Chat completion service."""

    name: str = "base"

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """
        Produce a completion.

        Raises:
            GenerationError: When the service fails or times out
        """

    @abstractmethod
    async def is_available(self) -> bool:
        """Probe the service; must never raise."""

    async def aclose(self) -> None:
        """Release network resources."""
