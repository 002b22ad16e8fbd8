from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Protocol

Value = int
Weakness = float
Input = Sequence[Value]
Output = list[Value]
Result = list[Output]
Feedback = Sequence[Weakness]

ValueOp2 = Callable[[Value, Value], Value]

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class MultiFunction(Protocol):
    """Multiple alternatives for a function taking multiple inputs and
    producing multiple outputs.

    This is the only view a fitness function gets of an individual.
    """

    def num_inputs(self) -> int:
        ...

    def num_outputs(self) -> int:
        ...

    def num_alternatives(self) -> int:
        ...

    def execute(self, input: Input) -> Result:
        ...


class Sim(MultiFunction, Protocol):
    """Simulated individual: a multi-function that accepts its own feedback."""

    def handle_feedback(self, feedback: Feedback) -> None:
        ...


FeedbackFn = Callable[[MultiFunction], Feedback]


def forward_op(lhs: Value, _rhs: Value) -> Value:
    return lhs


def make_seed(rng: random.Random) -> int:
    return rng.randint(INT32_MIN, INT32_MAX)


@dataclass(frozen=True)
class OpEntry:
    name: str
    fun: ValueOp2
    cost: int


class OpRepo:
    """Ordered catalog of available operations.

    Code 0 is always the zero-cost ``forward`` operation; every operation
    added afterwards costs 1. The repo also carries the fitness hook used to
    score individuals.
    """

    def __init__(self, find_weakness: FeedbackFn) -> None:
        self._find_weakness: FeedbackFn = find_weakness
        self._list: list[OpEntry] = [OpEntry("forward", forward_op, 0)]

    def __len__(self) -> int:
        return len(self._list)

    def add(self, name: str, fun: ValueOp2) -> OpRepo:
        if not name:
            raise ValueError("operation name must be non-empty")
        self._list.append(OpEntry(name, fun, 1))
        return self

    def _entry(self, code: int) -> OpEntry:
        if code < 0 or code > self.max_op():
            raise IndexError(f"operation code {code} out of range [0, {self.max_op()}]")
        return self._list[code]

    def name_of(self, code: int) -> str:
        return self._entry(code).name

    def cost_of(self, code: int) -> int:
        return self._entry(code).cost

    def max_op(self) -> int:
        return len(self._list) - 1

    def names(self) -> list[str]:
        return [entry.name for entry in self._list]

    def code_of(self, name: str) -> int:
        for code, entry in enumerate(self._list):
            if entry.name == name:
                return code
        raise KeyError(f"unknown operation: {name}")

    def find_weakness(self, sim: Sim) -> None:
        sim.handle_feedback(self._find_weakness(sim))

    def perform(self, code: int, lhs: Value, rhs: Value) -> Value:
        return self._entry(code).fun(lhs, rhs)
