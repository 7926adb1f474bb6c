"""
EchoSync - one message, several AI providers, answered concurrently.

Package structure:
- core: Settings, logging, shared types, task classifier, dispatch coordinator
- vault: Encrypted-at-rest provider credentials
- llm: Provider call contracts (OpenAI, Claude, Gemini, Perplexity, simulated)
- nodes: Persona nodes bound to one provider each
- configs: Node templates
"""

__version__ = "6.0.7"
