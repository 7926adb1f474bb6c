"""
Provider node - one persona bound to one provider.

The node decides per call whether it runs live or simulated, invokes the
matching call path and keeps its own metrics. send() never raises.
"""

import time
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from echosync.configs.nodes import NodeTemplate
from echosync.core.logging import get_logger
from echosync.core.types import SIMULATED, NodeMetrics, NodeResponse
from echosync.llm.base import CallRequest, ProviderCallable

if TYPE_CHECKING:
    from echosync.vault.store import CredentialVault

logger = get_logger("nodes.node")


class ProviderNode:
    """A configured persona exposed to callers by a short key."""

    def __init__(
        self,
        key: str,
        name: str,
        provider: str,
        persona: str,
        callables: Mapping[str, ProviderCallable],
        specializations: tuple[str, ...] = (),
    ):
        self.key = key
        self.name = name
        self.provider = provider
        self.persona = persona
        self.specializations = list(specializations)
        self.mood = "neutral"
        self.metrics = NodeMetrics()
        self._callables = callables
        logger.info(f"{self.name} bound to {self.provider}")

    @classmethod
    def from_template(
        cls, template: NodeTemplate, callables: Mapping[str, ProviderCallable]
    ) -> "ProviderNode":
        return cls(
            key=template.key,
            name=template.name,
            provider=template.provider,
            persona=template.persona,
            callables=callables,
            specializations=template.specializations,
        )

    def effective_mode(self, vault: "CredentialVault") -> str:
        """Bound provider if it has a call path and a key, else simulated."""
        if self.provider != SIMULATED and self.provider in self._callables and vault.has(self.provider):
            return self.provider
        return SIMULATED

    def simulation_reason(self, vault: "CredentialVault") -> str | None:
        """Why the node would run simulated, or None when it runs live."""
        if self.provider == SIMULATED:
            return None
        if self.provider not in self._callables:
            return f"No call path for '{self.provider}'"
        if not vault.has(self.provider):
            return f"No API key for '{self.provider}'"
        return None

    async def send(
        self,
        message: str,
        context: dict[str, Any] | None,
        vault: "CredentialVault",
    ) -> NodeResponse:
        started = time.perf_counter()
        self.metrics.total_calls += 1
        self.metrics.last_used = datetime.now()
        mode = SIMULATED

        try:
            mode = self.effective_mode(vault)
            logger.debug(f"Effective mode for {self.name}: {mode}")
            call_context = dict(context or {})
            if mode == SIMULATED:
                reason = self.simulation_reason(vault)
                if reason:
                    call_context["simulation_reason"] = reason
            request = CallRequest(
                node_name=self.name,
                persona=self.persona,
                message=message,
                api_key=vault.get(self.provider) if mode != SIMULATED else None,
                context=call_context,
            )
            text = await self._callables[mode].call(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self.metrics.record_failure()
            reason = str(e) or type(e).__name__
            logger.error(f"Error in send for {self.name} ({mode}): {reason}")
            return NodeResponse(
                node_key=self.key,
                node_name=self.name,
                message=f"{self.name}: error - {reason}",
                timestamp=datetime.now(),
                mode=mode,
                response_time_ms=round(elapsed_ms),
                success=False,
                error=reason,
                mood=self.mood,
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        self.metrics.record_success(elapsed_ms)
        return NodeResponse(
            node_key=self.key,
            node_name=self.name,
            message=text,
            timestamp=datetime.now(),
            mode=mode,
            response_time_ms=round(elapsed_ms),
            success=True,
            mood=self.mood,
        )

    def status(self, vault: "CredentialVault | None" = None) -> dict[str, Any]:
        data = {
            "key": self.key,
            "name": self.name,
            "provider": self.provider,
            "mood": self.mood,
            "specializations": list(self.specializations),
            "metrics": self.metrics.to_dict(),
        }
        if vault is not None:
            data["mode"] = self.effective_mode(vault)
        return data
