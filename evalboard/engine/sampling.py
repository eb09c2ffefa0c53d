"""Sampling decider for the run policy."""

import random


def should_persist(policy: str, rate_pct: int, rng: random.Random | None = None) -> bool:
    """
    "always" persists every event. "sampled" draws uniformly from [0, 100)
    and persists iff the draw is strictly below rate_pct.
    """
    if policy == "always":
        return True
    if policy == "sampled":
        draw = (rng or random).random() * 100
        return draw < rate_pct
    raise ValueError(f"Unknown run policy: {policy}")
