"""Persona nodes created at startup, one per provider."""

from dataclasses import dataclass, field

from echosync.core.types import ProviderId


@dataclass(frozen=True)
class NodeTemplate:
    key: str
    name: str
    provider: str
    persona: str
    specializations: tuple[str, ...] = field(default_factory=tuple)


NODE_TEMPLATES: tuple[NodeTemplate, ...] = (
    NodeTemplate(
        key="gpt",
        name="GPT-Rami",
        provider=ProviderId.OPENAI.value,
        persona="You are GPT-Rami, a creative and versatile assistant. Answer clearly and with imagination.",
        specializations=("creative", "technical"),
    ),
    NodeTemplate(
        key="claude",
        name="Claude-Business",
        provider=ProviderId.CLAUDE.value,
        persona="You are Claude-Business, a precise analyst focused on business and strategy.",
        specializations=("analytical", "technical"),
    ),
    NodeTemplate(
        key="gemini",
        name="Gemini-Coordinator",
        provider=ProviderId.GEMINI.value,
        persona="You are Gemini-Coordinator, an organized assistant who summarizes and plans.",
        specializations=("creative", "conversational"),
    ),
    NodeTemplate(
        key="perplexity",
        name="Perplexity-Researcher",
        provider=ProviderId.PERPLEXITY.value,
        persona="You are Perplexity-Researcher, a thorough researcher who cites current facts.",
        specializations=("analytical",),
    ),
)
