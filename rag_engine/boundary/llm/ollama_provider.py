"""
Ollama chat client.

Dependencies: httpx, rag_engine.configs
System role: Text generation adapter for answer synthesis
"""

import logging

import httpx

from rag_engine.boundary.embeddings.base import estimate_tokens
from rag_engine.boundary.llm.base import TextGenerationProvider
from rag_engine.configs.ollama import OllamaSettings
from rag_engine.core.exceptions import GenerationError
from rag_engine.models.generation import GenerationRequest, GenerationResponse

logger = logging.getLogger(__name__)


class OllamaTextGenerationProvider(TextGenerationProvider):
    """Non-streaming /api/chat client."""

    name = "ollama"

    def __init__(
        self,
        settings: OllamaSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            settings: Ollama settings (base URL, model, timeouts)
            client: Preconfigured client whose base_url points at the server
        """
        self._settings = settings or OllamaSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.generation_timeout,
        )

    @property
    def model(self) -> str:
        return self._settings.text_model

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        model = request.model or self.model
        payload = {
            "model": model,
            "messages": [message.model_dump() for message in request.messages],
            "stream": False,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }
        logger.info(f"{__name__}:generate - START: model={model}, messages={len(request.messages)}")

        try:
            response = await self._client.post(
                "/api/chat",
                json=payload,
                timeout=self._settings.generation_timeout,
            )
            response.raise_for_status()
            data = response.json()
            content = data["message"]["content"]
        except httpx.TimeoutException as e:
            raise GenerationError(
                f"Generation timed out after {self._settings.generation_timeout}s",
                model,
            ) from e
        except httpx.HTTPStatusError as e:
            raise GenerationError(
                f"HTTP error {e.response.status_code}: {e.response.text}",
                model,
            ) from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Cannot reach Ollama: {e}", model) from e
        except (ValueError, KeyError, TypeError) as e:
            raise GenerationError(f"Unexpected response format: {e}", model) from e

        if "prompt_eval_count" in data or "eval_count" in data:
            tokens_used = int(data.get("prompt_eval_count", 0)) + int(data.get("eval_count", 0))
        else:
            prompt = "".join(message.content for message in request.messages)
            tokens_used = estimate_tokens(prompt) + estimate_tokens(content)

        logger.info(f"{__name__}:generate - SUCCESS: tokens_used={tokens_used}")
        return GenerationResponse(content=content, tokens_used=tokens_used, model=model)

    async def is_available(self) -> bool:
        try:
            response = await self._client.get(
                "/api/tags",
                timeout=self._settings.availability_timeout,
            )
            response.raise_for_status()
            names = {entry.get("name") for entry in response.json().get("models", [])}
        except Exception as e:
            logger.warning(f"{__name__}:is_available - Ollama not reachable ({type(e).__name__}): {e}")
            return False
        return self.model in names or f"{self.model}:latest" in names

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
