"""OpenAI chat completions - also the request shape Perplexity speaks."""

import asyncio

import httpx

from echosync.core.config import Settings
from echosync.core.logging import get_logger
from echosync.llm.base import (
    CallRequest,
    ProviderCallable,
    ProviderId,
    ProviderResponseError,
    preview,
    require_text,
)

logger = get_logger("llm.openai")


class OpenAICompatibleCallable(ProviderCallable):
    """Bearer-authenticated POST {endpoint}/chat/completions."""

    label = "OpenAI-compatible"

    def __init__(
        self,
        endpoint: str,
        model: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.endpoint,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def call(self, request: CallRequest) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.persona},
                {"role": "user", "content": request.message},
            ],
        }
        logger.debug(f"{self.label} request: model={self.model}, node={request.node_name}")

        try:
            # httpx timeouts apply per read; this bounds the whole call
            async with asyncio.timeout(self.timeout):
                response = await self.client.post(
                    "/chat/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {request.api_key}"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{self.label} HTTP error: {e.response.status_code}")
            raise
        except httpx.TimeoutException:
            logger.error(f"{self.label} timed out after {self.timeout}s")
            raise
        except TimeoutError:
            logger.error(f"{self.label} call exceeded {self.timeout}s")
            raise TimeoutError(f"{self.label} call exceeded {self.timeout}s") from None

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"Unexpected {self.label} response: missing {e}") from e

        text = require_text(content, self.label)
        logger.debug(f"{self.label} response: {preview(text, 200)}")
        return text

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


class OpenAICallable(OpenAICompatibleCallable):
    mode = ProviderId.OPENAI.value
    label = "OpenAI"

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "OpenAICallable":
        return cls(
            endpoint=settings.openai_endpoint,
            model=settings.openai_model,
            timeout=settings.openai_timeout,
            transport=transport,
        )
