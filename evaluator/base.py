"""Base evaluator interface shared by all fitness hooks."""

from __future__ import annotations

import math
import numbers
from abc import ABC, abstractmethod
from collections.abc import Sequence

from gp_core.ops import MultiFunction


def _validated_weakness(weakness: object) -> float:
    if isinstance(weakness, bool) or not isinstance(weakness, numbers.Real):
        raise ValueError("weakness must be a real number")
    value = float(weakness)
    if math.isnan(value):
        raise ValueError("weakness must not be NaN")
    return value


class BaseEvaluator(ABC):
    """Base class for fitness hooks.

    An evaluator only sees the ``MultiFunction`` view of an individual and
    returns one weakness per alternative (lower is better). Evaluations must
    be deterministic and must not modify the individual.
    """

    def __call__(self, fun: MultiFunction) -> list[float]:
        feedback = [_validated_weakness(weakness) for weakness in self.find_weakness(fun)]
        if len(feedback) != fun.num_alternatives():
            raise ValueError(
                f"evaluator returned {len(feedback)} weaknesses for {fun.num_alternatives()} alternatives"
            )
        return feedback

    @abstractmethod
    def find_weakness(self, fun: MultiFunction) -> Sequence[float]:
        """Score every alternative of ``fun``."""
