"""
Call path registry.

Maps each mode (provider id or "simulated") to the callable that serves it.
Built once from settings and shared by every node.
"""

import httpx

from echosync.core.config import Settings
from echosync.core.logging import get_logger
from echosync.llm.base import ProviderCallable
from echosync.llm.claude import ClaudeCallable
from echosync.llm.gemini import GeminiCallable
from echosync.llm.openai import OpenAICallable
from echosync.llm.perplexity import PerplexityCallable
from echosync.llm.simulated import SimulatedCallable

logger = get_logger("llm.registry")


def create_callables(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, ProviderCallable]:
    """Create one callable per provider plus the simulator.

    `transport` is handed to every HTTP client (tests pass httpx.MockTransport).
    """
    anthropic_http = httpx.AsyncClient(transport=transport) if transport else None
    callables: list[ProviderCallable] = [
        OpenAICallable.from_settings(settings, transport=transport),
        ClaudeCallable.from_settings(settings, http_client=anthropic_http),
        GeminiCallable.from_settings(settings, transport=transport),
        PerplexityCallable.from_settings(settings, transport=transport),
        SimulatedCallable(),
    ]
    table = {c.mode: c for c in callables}
    logger.debug(f"Call paths: {', '.join(table)}")
    return table
