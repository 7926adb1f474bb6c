"""
Core module - configuration, shared types, classification and dispatch.

Components:
- config: Settings management via pydantic-settings
- types: Shared data structures (TaskAnalysis, NodeResponse, DispatchOutcome, ...)
- classifier: Keyword task classifier
- coordinator: Concurrent fan-out across provider nodes
- logging: Logging setup
"""

from echosync.core.config import Settings
from echosync.core.types import DispatchOutcome, NodeResponse, TaskAnalysis

__all__ = ["Settings", "DispatchOutcome", "NodeResponse", "TaskAnalysis"]
