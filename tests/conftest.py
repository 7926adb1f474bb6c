"""Shared fixtures."""

from pathlib import Path

import pytest

from echosync.core.config import Settings
from echosync.core.types import SIMULATED
from echosync.llm.base import CallRequest, ProviderCallable
from echosync.llm.simulated import SimulatedCallable
from echosync.vault.store import CredentialVault

PROVIDER_ENV_VARS = ("OPENAI_API_KEY", "CLAUDE_API_KEY", "GEMINI_API_KEY", "PERPLEXITY_API_KEY")


@pytest.fixture(autouse=True)
def _clean_provider_env(monkeypatch):
    """Keep real provider keys in the shell out of the tests."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(_env_file=None, data_dir=tmp_path)


@pytest.fixture
def vault(settings: Settings) -> CredentialVault:
    vault = CredentialVault(settings)
    vault.initialize()
    return vault


class StubCallable(ProviderCallable):
    """Canned live provider. Raises `error` instead of replying when set."""

    def __init__(self, mode: str, reply: str = "live reply", error: Exception | None = None):
        self.mode = mode
        self.reply = reply
        self.error = error
        self.requests: list[CallRequest] = []
        self.closed = False

    async def call(self, request: CallRequest) -> str:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return f"{request.node_name}: {self.reply}"

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def callables() -> dict[str, ProviderCallable]:
    table: dict[str, ProviderCallable] = {
        mode: StubCallable(mode) for mode in ("openai", "claude", "gemini", "perplexity")
    }
    table[SIMULATED] = SimulatedCallable(delay_range=(0, 0))
    return table
