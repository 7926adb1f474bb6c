"""Perplexity provider - OpenAI-compatible chat completions."""

import httpx

from echosync.core.config import Settings
from echosync.llm.base import ProviderId
from echosync.llm.openai import OpenAICompatibleCallable


class PerplexityCallable(OpenAICompatibleCallable):
    mode = ProviderId.PERPLEXITY.value
    label = "Perplexity"

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "PerplexityCallable":
        return cls(
            endpoint=settings.perplexity_endpoint,
            model=settings.perplexity_model,
            timeout=settings.perplexity_timeout,
            transport=transport,
        )
