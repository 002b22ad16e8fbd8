"""Symbolic regression against a known integer target function."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from typing import Callable

from gp_core.ops import MultiFunction

from .base import BaseEvaluator

TargetFn = Callable[..., Sequence[int]]


def grid_samples(num_inputs: int, low: int, high: int) -> list[tuple[int, ...]]:
    """All input vectors with every component in ``[low, high]``."""
    if low > high:
        raise ValueError("low must not exceed high")
    return list(itertools.product(range(low, high + 1), repeat=num_inputs))


class RegressionEvaluator(BaseEvaluator):
    """Weakness is the summed absolute error against ``target`` over ``samples``."""

    def __init__(self, target: TargetFn, samples: Sequence[Sequence[int]]) -> None:
        if not samples:
            raise ValueError("samples must be non-empty")
        self.target: TargetFn = target
        self.samples: list[list[int]] = [list(sample) for sample in samples]
        self._expected: list[list[int]] = [list(target(*sample)) for sample in self.samples]

    def find_weakness(self, fun: MultiFunction) -> list[float]:
        errors = [0] * fun.num_alternatives()
        for sample, expected in zip(self.samples, self._expected):
            result = fun.execute(sample)
            for slot, output in enumerate(result):
                if len(output) != len(expected):
                    raise ValueError(f"expected {len(expected)} outputs, got {len(output)}")
                errors[slot] += sum(abs(got - want) for got, want in zip(output, expected))
        return [float(error) for error in errors]
