"""Statistical tests for the sampling decider."""

import random

import pytest

from evalboard.engine.sampling import should_persist


def _persisted(policy: str, rate: int, trials: int) -> int:
    return sum(should_persist(policy, rate) for _ in range(trials))


def test_always_policy_ignores_rate():
    assert _persisted("always", 0, 1000) == 1000


def test_rate_zero_never_persists():
    assert _persisted("sampled", 0, 1000) == 0


def test_rate_hundred_always_persists():
    assert _persisted("sampled", 100, 1000) == 1000


def test_rate_fifty_within_band():
    """Observed rate over 10k trials stays within 45-55%."""
    kept = _persisted("sampled", 50, 10_000)
    assert 4500 <= kept <= 5500


def test_custom_rng_is_used():
    """A draw of 25 persists at rate 26 but not at rate 25."""
    rng = random.Random()
    rng.random = lambda: 0.25
    assert should_persist("sampled", 26, rng) is True
    assert should_persist("sampled", 25, rng) is False


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        should_persist("sometimes", 50)
