"""
Provider call interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from echosync.core.types import SIMULATED, ProviderId


class ProviderResponseError(Exception):
    """Provider answered, but not with the envelope we expected."""


@dataclass
class CallRequest:
    """Everything one provider call needs."""

    node_name: str
    persona: str
    message: str
    api_key: str | None = None
    context: dict[str, Any] = field(default_factory=dict)


class ProviderCallable(ABC):
    """One provider's call contract.

    `mode` is the provider id it serves, or "simulated".
    """

    mode: str

    @abstractmethod
    async def call(self, request: CallRequest) -> str:
        """Return the reply text. Raises on transport or envelope errors."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        return None


def preview(text: str, limit: int = 100) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def require_text(value: Any, provider: str) -> str:
    if not isinstance(value, str):
        raise ProviderResponseError(f"{provider} response had no text (got {type(value).__name__})")
    return value


__all__ = [
    "CallRequest",
    "ProviderCallable",
    "ProviderId",
    "ProviderResponseError",
    "SIMULATED",
    "preview",
    "require_text",
]
