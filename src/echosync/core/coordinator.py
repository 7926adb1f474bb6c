"""Dispatch coordinator - fans one message out to many nodes and aggregates replies."""

import asyncio
import time
from collections import deque
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from echosync import __version__
from echosync.configs.nodes import NODE_TEMPLATES, NodeTemplate
from echosync.core.classifier import TaskClassifier
from echosync.core.config import Settings
from echosync.core.logging import get_logger
from echosync.core.types import (
    CredentialState,
    CredentialStatus,
    DispatchOutcome,
    NodeFailure,
    NodeResult,
    SystemMetrics,
    TaskAnalysis,
)
from echosync.llm.base import ProviderCallable
from echosync.llm.registry import create_callables
from echosync.nodes.node import ProviderNode
from echosync.vault.store import CredentialVault

logger = get_logger("core.coordinator")

ALL_NODES = "all"
AUTO_NODES = "auto"

StatusListener = Callable[[dict[str, Any]], Any]


class DispatchValidationError(ValueError):
    """Request rejected before any node was called."""


class DispatchCoordinator:
    """Owns the nodes and runs isolated-failure fan-outs across them."""

    def __init__(
        self,
        settings: Settings,
        vault: CredentialVault,
        classifier: TaskClassifier | None = None,
        callables: dict[str, ProviderCallable] | None = None,
        templates: Iterable[NodeTemplate] = NODE_TEMPLATES,
    ):
        self.settings = settings
        self.vault = vault
        self.classifier = classifier or TaskClassifier(settings)
        self._callables = callables if callables is not None else create_callables(settings)
        self._nodes: dict[str, ProviderNode] = {}
        for template in templates:
            self._nodes[template.key] = ProviderNode.from_template(template, self._callables)
        self.metrics = SystemMetrics()
        self._history: deque[DispatchOutcome] = deque(maxlen=settings.history_limit)
        self._listeners: list[StatusListener] = []
        self._initialized = False
        logger.info(f"{len(self._nodes)} nodes configured")

    @property
    def nodes(self) -> dict[str, ProviderNode]:
        return dict(self._nodes)

    def get_node(self, key: str) -> ProviderNode | None:
        return self._nodes.get(key)

    @property
    def history(self) -> list[DispatchOutcome]:
        return list(self._history)

    def initialize(self) -> None:
        """Load credentials and log the provider table. Safe to call repeatedly."""
        if self._initialized:
            return
        self.vault.initialize()
        self.metrics.start_time = datetime.now()

        logger.info("Initial API status:")
        for entry in self.vault.status():
            logger.info(f"   {entry.provider_id:<12}: {entry.state.value:<10} ({entry.preview})")

        self._initialized = True
        logger.info(f"EchoSync {__version__} initialized. Env: {self.settings.environment}")

    def select_nodes(self, selector: Any, analysis: TaskAnalysis | None = None) -> list[str]:
        """Resolve a node selector to configured keys, de-duplicated, order kept.

        "all" → every node; "auto" → classifier suggestions; list → known keys;
        a single configured key → that node; anything else → every node.
        """
        if selector == ALL_NODES:
            return list(self._nodes)

        if selector == AUTO_NODES:
            suggested = analysis.suggested_nodes if analysis else []
            keys = [k for k in dict.fromkeys(suggested) if k in self._nodes]
            return keys or list(self._nodes)

        if isinstance(selector, (list, tuple)):
            return [k for k in dict.fromkeys(selector) if isinstance(k, str) and k in self._nodes]

        if isinstance(selector, str) and selector in self._nodes:
            return [selector]

        return list(self._nodes)

    async def dispatch_all(
        self,
        message: Any,
        nodes: Any = ALL_NODES,
        context: dict[str, Any] | None = None,
    ) -> DispatchOutcome:
        """Send message to the selected nodes concurrently and wait for all of them.

        Raises:
            DispatchValidationError: message missing or blank; nothing was called
        """
        if not isinstance(message, str) or not message.strip():
            raise DispatchValidationError("Message is required")

        self.initialize()
        started = time.perf_counter()

        try:
            analysis = self.classifier.analyze(message, context)
            keys = self.select_nodes(nodes, analysis)
            node_context = {**(context or {}), "task_analysis": analysis, "requester": "dispatch_all"}
            logger.info(f"Dispatching to {', '.join(keys) or 'no nodes'} ({analysis.primary_type.value})")

            results = await asyncio.gather(
                *(self._nodes[key].send(message, node_context, self.vault) for key in keys),
                return_exceptions=True,
            )

            responses: dict[str, NodeResult] = {}
            for key, result in zip(keys, results):
                if isinstance(result, BaseException):
                    if isinstance(result, asyncio.CancelledError):
                        raise result
                    logger.error(f"Node {key} error: {result}")
                    responses[key] = NodeFailure(
                        error=str(result) or type(result).__name__,
                        timestamp=datetime.now(),
                    )
                else:
                    responses[key] = result
        except Exception as e:
            self.metrics.total_requests += 1
            self.metrics.failed_requests += 1
            logger.error(f"Dispatch failed: {e}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        self.metrics.total_requests += 1
        self.metrics.successful_requests += 1
        self.metrics.total_response_time_ms += elapsed_ms
        self.metrics.avg_response_time_ms = (
            self.metrics.total_response_time_ms / self.metrics.successful_requests
        )

        outcome = DispatchOutcome(
            message=message,
            task_analysis=analysis,
            responses=responses,
            timestamp=datetime.now(),
            elapsed_ms=round(elapsed_ms),
        )
        self._history.append(outcome)
        return outcome

    def add_status_listener(self, listener: StatusListener) -> None:
        """Register a callback (sync or async) for status snapshots after key changes."""
        self._listeners.append(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _broadcast_status(self) -> None:
        snapshot = self.system_status()
        for listener in list(self._listeners):
            try:
                result = listener(snapshot)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"Status listener failed: {e}")

    async def set_credential(self, provider_id: str, secret: str | None) -> bool:
        """Set or clear a provider key; listeners hear about it only if it persisted."""
        saved = self.vault.set(provider_id, secret)
        if saved:
            for node in self._nodes.values():
                if node.provider == str(provider_id).strip().lower():
                    logger.info(f"Node {node.name} now runs {node.effective_mode(self.vault)}")
            await self._broadcast_status()
        return saved

    def credential_status(self) -> list[CredentialStatus]:
        return self.vault.status()

    def record_rating(self, node_key: str, rating: float, context: str = "") -> None:
        if node_key not in self._nodes:
            raise KeyError(f"Unknown node: {node_key}")
        self.classifier.record_rating(node_key, rating, context)

    def system_status(self) -> dict[str, Any]:
        return {
            "echosync_status": "active",
            "version": __version__,
            "uptime": self.metrics.uptime_seconds(),
            "nodes": [node.status(self.vault) for node in self._nodes.values()],
            "apis": [entry.to_dict() for entry in self.vault.status()],
        }

    def health(self) -> dict[str, Any]:
        return {
            "status": "healthy",
            "version": __version__,
            "uptime": self.metrics.uptime_seconds(),
            "metrics": self.metrics.to_dict(),
            "nodes": len(self._nodes),
            "credentials": sum(
                1 for entry in self.vault.status() if entry.state is CredentialState.ACTIVE
            ),
        }

    async def close(self) -> None:
        """Close all provider connections."""
        for provider in self._callables.values():
            try:
                await provider.close()
            except Exception as e:
                logger.warning(f"Failed to close {provider.mode}: {e}")
