from typing import List

import pytest

from hanzi_overlay.core.selection import ReplacementSelector


class _ScriptedRandom:
    def __init__(self, values: List[float]) -> None:
        self.values = list(values)
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self.values.pop(0)


def test_accepts_draws_below_probability() -> None:
    rng = _ScriptedRandom([0.1, 0.9, 0.24, 0.25])
    selector = ReplacementSelector(max_replacements=10, probability=0.25, rng=rng)

    assert [selector.consider() for _ in range(4)] == [True, False, True, False]
    assert selector.count == 2
    assert selector.remaining == 8


def test_budget_is_never_exceeded() -> None:
    rng = _ScriptedRandom([0.0] * 5)
    selector = ReplacementSelector(max_replacements=3, probability=1.0, rng=rng)

    results = [selector.consider() for _ in range(5)]

    assert results == [True, True, True, False, False]
    assert selector.exhausted
    assert selector.count == 3
    # No randomness is consumed once the budget is spent.
    assert rng.draws == 3


def test_zero_budget_is_exhausted_immediately() -> None:
    selector = ReplacementSelector(max_replacements=0, probability=1.0)

    assert selector.exhausted
    assert not selector.consider()


@pytest.mark.parametrize("kwargs", [{"max_replacements": -1}, {"probability": 1.5}, {"probability": -0.1}])
def test_rejects_invalid_parameters(kwargs) -> None:
    with pytest.raises(ValueError):
        ReplacementSelector(**kwargs)
