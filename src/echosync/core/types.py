"""
Shared type definitions.

Core data structures passed between the vault, nodes and coordinator.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any


class ProviderId(Enum):
    """Providers with a live call path."""

    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"
    PERPLEXITY = "perplexity"


SIMULATED = "simulated"


class TaskCategory(Enum):
    CREATIVE = "creative"
    ANALYTICAL = "analytical"
    CONVERSATIONAL = "conversational"
    TECHNICAL = "technical"
    GENERAL = "general"


class CredentialState(Enum):
    ACTIVE = "active"
    MISSING = "missing"


@dataclass(frozen=True)
class CredentialStatus:
    """Redacted view of one provider's credential."""

    provider_id: str
    state: CredentialState
    has_key: bool
    preview: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_id": self.provider_id,
            "state": self.state.value,
            "has_key": self.has_key,
            "preview": self.preview,
        }


@dataclass
class TaskAnalysis:
    """Per-request classification of a message."""

    primary_type: TaskCategory = TaskCategory.GENERAL
    confidence: float = 0.5
    suggested_nodes: list[str] = field(default_factory=list)
    # Informational hints, not used for routing
    task_complexity: int = 1
    urgency: str = "normal"
    estimated_duration: str = "medium"
    adaptive_score: float = 0.5

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["primary_type"] = self.primary_type.value
        return data


@dataclass
class NodeMetrics:
    """Call counters for one node. Counters only ever grow."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    total_response_time_ms: float = 0.0
    avg_response_time_ms: float = 0.0
    last_used: datetime | None = None

    def record_success(self, elapsed_ms: float) -> None:
        self.successful_calls += 1
        self.total_response_time_ms += elapsed_ms
        self.avg_response_time_ms = self.total_response_time_ms / self.successful_calls

    def record_failure(self) -> None:
        self.failed_calls += 1

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["last_used"] = self.last_used.isoformat() if self.last_used else None
        return data


@dataclass(frozen=True)
class NodeResponse:
    """What one node produced for a dispatch.

    Adapter-level failures are also reported here with success=False,
    so the message text is always presentable to the end user.
    """

    node_key: str
    node_name: str
    message: str
    timestamp: datetime
    mode: str
    response_time_ms: int
    success: bool
    error: str | None = None
    mood: str = "neutral"

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_key": self.node_key,
            "node_name": self.node_name,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "mode": self.mode,
            "response_time_ms": self.response_time_ms,
            "success": self.success,
            "error": self.error,
            "mood": self.mood,
        }


@dataclass(frozen=True)
class NodeFailure:
    """A node invocation that raised instead of returning a response."""

    error: str
    timestamp: datetime
    success: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
            "success": self.success,
        }


NodeResult = NodeResponse | NodeFailure


@dataclass(frozen=True)
class DispatchOutcome:
    """Aggregated result of one fan-out."""

    message: str
    task_analysis: TaskAnalysis
    responses: Mapping[str, NodeResult]
    timestamp: datetime
    elapsed_ms: int

    def __post_init__(self) -> None:
        # Read-only view over a private copy
        object.__setattr__(self, "responses", MappingProxyType(dict(self.responses)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "task_analysis": self.task_analysis.to_dict(),
            "responses": {key: result.to_dict() for key, result in self.responses.items()},
            "timestamp": self.timestamp.isoformat(),
            "elapsed_ms": self.elapsed_ms,
        }


@dataclass
class SystemMetrics:
    """Request-level counters kept by the coordinator."""

    start_time: datetime | None = None
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_response_time_ms: float = 0.0
    avg_response_time_ms: float = 0.0

    def uptime_seconds(self) -> int:
        if self.start_time is None:
            return 0
        return int((datetime.now() - self.start_time).total_seconds())

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["start_time"] = self.start_time.isoformat() if self.start_time else None
        return data
