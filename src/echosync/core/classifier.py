"""Task classifier - picks a category and suggested nodes for a message."""

from collections import deque
from datetime import datetime
from typing import Any

from echosync.core.config import Settings
from echosync.core.logging import get_logger
from echosync.core.types import TaskAnalysis, TaskCategory

logger = get_logger("core.classifier")


# Scanned in this order; the first category with any hit wins
CATEGORY_KEYWORDS: dict[TaskCategory, tuple[str, ...]] = {
    TaskCategory.CREATIVE: (
        "write", "story", "poem", "creative", "imagine", "invent", "idea",
    ),
    TaskCategory.ANALYTICAL: (
        "analyze", "analysis", "compare", "research", "statistics", "evaluate",
    ),
    TaskCategory.CONVERSATIONAL: (
        "hello", "how are you", "thanks", "thank you", "good morning", "chat",
    ),
    TaskCategory.TECHNICAL: (
        "code", "programming", "api", "bug", "debug", "algorithm", "function",
    ),
}

SUGGESTED_NODES: dict[TaskCategory, tuple[str, ...]] = {
    TaskCategory.CREATIVE: ("gpt", "claude", "gemini"),
    TaskCategory.ANALYTICAL: ("claude", "perplexity"),
    TaskCategory.TECHNICAL: ("gpt", "claude"),
}
DEFAULT_SUGGESTED_NODES: tuple[str, ...] = ("gpt", "gemini")

DEFAULT_CONFIDENCE = 0.5


def match_confidence(matches: int) -> float:
    return min(0.9, 0.3 + 0.2 * matches)


class TaskClassifier:
    """Keyword classifier with a write-only rating log per node."""

    def __init__(self, settings: Settings):
        self._history_limit = settings.history_limit
        self._influence_history: dict[str, deque[dict[str, Any]]] = {}

    def analyze(self, message: str, context: dict[str, Any] | None = None) -> TaskAnalysis:
        """Classify a message. Pure function of the text and the keyword tables."""
        analysis = TaskAnalysis()
        lowered = message.lower()

        for category, keywords in CATEGORY_KEYWORDS.items():
            matches = sum(1 for keyword in keywords if keyword in lowered)
            if matches:
                analysis.primary_type = category
                analysis.confidence = match_confidence(matches)
                break

        analysis.suggested_nodes = list(
            SUGGESTED_NODES.get(analysis.primary_type, DEFAULT_SUGGESTED_NODES)
        )
        logger.debug(
            f"Classified as {analysis.primary_type.value} "
            f"(confidence={analysis.confidence:.2f}, nodes={analysis.suggested_nodes})"
        )
        return analysis

    def record_rating(self, node_key: str, rating: float, context: str = "") -> None:
        """Log a post-hoc quality rating. Never consulted by analyze()."""
        history = self._influence_history.setdefault(
            node_key, deque(maxlen=self._history_limit)
        )
        history.append({"rating": rating, "context": context, "timestamp": datetime.now()})

    def influence_history(self, node_key: str) -> list[dict[str, Any]]:
        return list(self._influence_history.get(node_key, ()))
