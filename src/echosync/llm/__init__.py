"""
LLM module - provider call contracts.

Call paths:
- openai: OpenAI chat completions
- claude: Anthropic Messages API
- gemini: Google generateContent
- perplexity: Perplexity (OpenAI-compatible)
- simulated: local canned replies when no key is configured

Nodes pick one per call from the table built by registry.create_callables().
"""
