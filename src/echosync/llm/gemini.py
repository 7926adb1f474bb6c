"""Google Gemini provider via the generateContent REST endpoint."""

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

logger = get_logger("llm.gemini")


class GeminiCallable(ProviderCallable):
    """Gemini generateContent. The persona is folded into the user text."""

    mode = ProviderId.GEMINI.value

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

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "GeminiCallable":
        return cls(
            endpoint=settings.gemini_endpoint,
            model=settings.gemini_model,
            timeout=settings.gemini_timeout,
            transport=transport,
        )

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
            "contents": [
                {"parts": [{"text": f"{request.persona}\n{request.message}"}]},
            ],
        }
        logger.debug(f"Gemini request: model={self.model}, node={request.node_name}")

        try:
            # Key goes in a header so it never lands in logged URLs
            async with asyncio.timeout(self.timeout):
                response = await self.client.post(
                    f"/models/{self.model}:generateContent",
                    json=payload,
                    headers={"x-goog-api-key": request.api_key or ""},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini HTTP error: {e.response.status_code}")
            raise
        except httpx.TimeoutException:
            logger.error(f"Gemini timed out after {self.timeout}s")
            raise
        except TimeoutError:
            logger.error(f"Gemini call exceeded {self.timeout}s")
            raise TimeoutError(f"Gemini call exceeded {self.timeout}s") from None

        try:
            content = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"Unexpected Gemini response: missing {e}") from e

        text = require_text(content, "Gemini")
        logger.debug(f"Gemini response: {preview(text, 200)}")
        return text

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
