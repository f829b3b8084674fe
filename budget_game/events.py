"""Deterministic random-event table applied at settlement."""

import math
from dataclasses import dataclass

EVENT_COUNT = 10
UTILITY_SPIKE_RATIO = 0.05


@dataclass(frozen=True)
class RandomEvent:
    message: str
    adjustment: float

    @property
    def is_shock(self) -> bool:
        return self.adjustment < 0


def event_table(biweekly_income: float) -> tuple[RandomEvent, ...]:
    """Build the ordered event table. Only the utility spike depends on income."""
    utility_spike = -math.floor((biweekly_income or 0) * UTILITY_SPIKE_RATIO)
    return (
        RandomEvent("🚗 Oh no! Your car needs unexpected repairs.", -150),
        RandomEvent("⚡ Surprise! Your utility bill is higher than expected.", utility_spike),
        RandomEvent("🏥 Uh-oh! You had an unexpected medical expense.", -100),
        RandomEvent("🎉 Great news! You received a small bonus at work!", 100),
        RandomEvent("💫 Lucky you! You got a refund on an overcharge.", 50),
        RandomEvent("🧥 Nice! You found some extra cash in an old jacket!", 75),
        RandomEvent("🏠 Bummer! Your home needs an urgent repair.", -120),
        RandomEvent("🤝 Hey! A friend finally paid you back.", 60),
        RandomEvent("🍽️ Sweet! You got an unexpected dining discount.", 30),
        RandomEvent("⚠️ Oh dear! You fell for a small online scam.", -80),
    )


def event_index(biweekly_income: float, iteration: int) -> int:
    """Table index for a round. A non-integer income + iteration selects the first entry."""
    total = (biweekly_income or 0) + (iteration or 1)
    if total != math.floor(total):
        return 0
    return int(total) % EVENT_COUNT


def generate_random_event(biweekly_income: float, iteration: int) -> RandomEvent:
    """Pick the round's event. Same inputs always give the same event."""
    return event_table(biweekly_income)[event_index(biweekly_income, iteration)]
