"""Local simulator used when a node's provider has no credential."""

import asyncio
import random

from echosync.llm.base import SIMULATED, CallRequest, ProviderCallable

RESPONSE_TEMPLATES = (
    'I received your message: "{excerpt30}..."',
    "Interesting question! Let me think about that.",
    'Here is what I make of "{excerpt25}..."',
    "Thanks for the message! I'm ready to help.",
)


class SimulatedCallable(ProviderCallable):
    """Canned replies after a short random delay. Never fails."""

    mode = SIMULATED

    def __init__(self, delay_range: tuple[float, float] = (0.1, 0.2), rng: random.Random | None = None):
        self.delay_range = delay_range
        self._rng = rng or random.Random()

    async def call(self, request: CallRequest) -> str:
        await asyncio.sleep(self._rng.uniform(*self.delay_range))
        template = self._rng.choice(RESPONSE_TEMPLATES)
        text = str(request.message)
        reply = template.format(excerpt30=text[:30], excerpt25=text[:25])
        reason = request.context.get("simulation_reason")
        if reason:
            reply = f"{reply} [{reason}]"
        return f"{request.node_name} (simulated): {reply}"
