from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TypeVar

from typing_extensions import override

T = TypeVar("T")


class SelectionStrategy(ABC):
    """Picks a parent among the first ``limit`` entries of a best-first sequence."""

    @abstractmethod
    def select_index(self, limit: int) -> int:
        raise NotImplementedError

    def select(self, ranked: Sequence[T], limit: int) -> T:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if limit > len(ranked):
            raise ValueError(f"limit {limit} exceeds population size {len(ranked)}")
        return ranked[self.select_index(limit)]


class BiasedPrefixSelection(SelectionStrategy):
    """Tournament of two over positions: the better rank of two uniform draws wins."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng: random.Random = rng or random.Random()

    @override
    def select_index(self, limit: int) -> int:
        return min(self._rng.randint(0, limit - 1), self._rng.randint(0, limit - 1))


class UniformPrefixSelection(SelectionStrategy):
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng: random.Random = rng or random.Random()

    @override
    def select_index(self, limit: int) -> int:
        return self._rng.randint(0, limit - 1)
