"""
Claude API provider implementation.

Uses Anthropic's async SDK; the persona goes in the system prompt.
"""

import asyncio

import anthropic
import httpx
from anthropic import APIConnectionError, APIError, APITimeoutError, RateLimitError

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

logger = get_logger("llm.claude")


class ClaudeCallable(ProviderCallable):
    """Anthropic Messages API."""

    mode = ProviderId.CLAUDE.value

    def __init__(
        self,
        model: str,
        timeout: float,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.base_url = base_url
        self._http_client = http_client
        self._client: anthropic.AsyncAnthropic | None = None
        self._client_key: str | None = None
        # Replaced clients, closed in close()
        self._retired: list[anthropic.AsyncAnthropic] = []

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "ClaudeCallable":
        return cls(
            model=settings.claude_model,
            timeout=settings.claude_timeout,
            max_tokens=settings.claude_max_tokens,
            temperature=settings.claude_temperature,
            base_url=settings.claude_endpoint,
            http_client=http_client,
        )

    def client_for(self, api_key: str) -> anthropic.AsyncAnthropic:
        """SDK client bound to api_key; rebuilt when the vault key changes."""
        if self._client is None or self._client_key != api_key:
            if self._client is not None:
                self._retired.append(self._client)
            self._client = anthropic.AsyncAnthropic(
                api_key=api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=self._http_client,
            )
            self._client_key = api_key
        return self._client

    async def call(self, request: CallRequest) -> str:
        logger.debug(f"Claude request: model={self.model}, max_tokens={self.max_tokens}")

        try:
            async with asyncio.timeout(self.timeout):
                response = await self.client_for(request.api_key or "").messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    system=request.persona,
                    messages=[{"role": "user", "content": request.message}],
                )
        except APITimeoutError:
            logger.error(f"Claude timed out after {self.timeout}s")
            raise
        except TimeoutError:
            logger.error(f"Claude call exceeded {self.timeout}s")
            raise TimeoutError(f"Claude call exceeded {self.timeout}s") from None
        except RateLimitError as e:
            logger.warning(f"Rate limited: {e}")
            raise
        except APIConnectionError as e:
            logger.error(f"Connection error: {e}")
            raise
        except APIError as e:
            logger.error(f"API error: {e}")
            raise

        try:
            content = response.content[0].text
        except (IndexError, AttributeError, TypeError) as e:
            raise ProviderResponseError(f"Unexpected Claude response: {e}") from e

        text = require_text(content, "Claude")
        logger.debug(f"Claude response: {preview(text, 200)}")
        return text

    async def close(self) -> None:
        for client in self._retired:
            await client.close()
        self._retired.clear()
        if self._client:
            await self._client.close()
            self._client = None
            self._client_key = None
