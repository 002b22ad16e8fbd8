from __future__ import annotations

import enum
import random
from dataclasses import dataclass, replace

from .ops import Feedback, Input, OpRepo, Result, Value, Weakness

# larger expanded expressions render as a node-count placeholder
RENDER_LIMIT = 9000


@dataclass(frozen=True)
class Ref:
    """Reference to either a program input or the result of an earlier operation.

    Negative ``idx`` values address inputs (``-1`` is input 0), zero and
    positive values address operations by position.
    """

    idx: int

    @property
    def is_input(self) -> bool:
        return self.idx < 0

    @property
    def is_operation(self) -> bool:
        return self.idx >= 0

    @property
    def in_idx(self) -> int:
        return -(self.idx + 1)

    @property
    def op_idx(self) -> int:
        return self.idx

    @classmethod
    def input(cls, in_idx: int) -> Ref:
        if in_idx < 0:
            raise ValueError("input index must be non-negative")
        return cls(-(in_idx + 1))

    @classmethod
    def op(cls, op_idx: int) -> Ref:
        if op_idx < 0:
            raise ValueError("operation index must be non-negative")
        return cls(op_idx)

    @classmethod
    def nop(cls) -> Ref:
        return cls.input(0)

    @classmethod
    def random(cls, rng: random.Random, in_cnt: int, limit: int) -> Ref:
        """Draw uniformly among all inputs and the first ``limit`` operations."""
        return cls(rng.randint(-in_cnt, limit - 1))

    def __str__(self) -> str:
        return f"i{self.in_idx}" if self.is_input else f"@{self.op_idx}"


@dataclass(frozen=True)
class Op:
    code: int
    lhs: Ref
    rhs: Ref


class MutationKind(enum.Enum):
    CODE = 0
    LHS = 1
    RHS = 2


@dataclass(frozen=True)
class Stats:
    weakness: Weakness = 0.0
    cost: int = 0
    born: int = 0

    def sort_key(self) -> tuple[float, int, int]:
        # younger is better
        return (self.weakness, self.cost, -self.born)

    def __lt__(self, other: Stats) -> bool:
        return self.sort_key() < other.sort_key()


def _value(input: Input, values: list[Value], ref: Ref) -> Value:
    return input[ref.in_idx] if ref.is_input else values[ref.op_idx]


def _size(sizes: list[int], ref: Ref) -> int:
    return 1 if ref.is_input else sizes[ref.op_idx]


class Program:
    """Individual represented as a flat list of binary operations.

    Operations may only refer to inputs and to operations placed strictly
    before them, so the list is always a topologically ordered DAG. Every
    ``out_cnt`` consecutive operations form one slot: an alternative set of
    outputs for the same inputs.
    """

    def __init__(self, repo: OpRepo, in_cnt: int, out_cnt: int, gen: int = 0) -> None:
        if in_cnt <= 0:
            raise ValueError("in_cnt must be positive")
        if out_cnt <= 0:
            raise ValueError("out_cnt must be positive")
        self._repo: OpRepo = repo
        self._stats: Stats = Stats(born=gen)
        self._in_cnt: int = in_cnt
        self._out_cnt: int = out_cnt
        self._ops: list[Op] = []
        self._best_slot: int = 0

    def __len__(self) -> int:
        return len(self._ops)

    @property
    def repo(self) -> OpRepo:
        return self._repo

    @property
    def ops(self) -> tuple[Op, ...]:
        return tuple(self._ops)

    @property
    def stats(self) -> Stats:
        return self._stats

    @property
    def best_slot(self) -> int:
        return self._best_slot

    def copy(self) -> Program:
        clone = Program(self._repo, self._in_cnt, self._out_cnt, self._stats.born)
        clone._ops = list(self._ops)
        clone._stats = self._stats
        clone._best_slot = self._best_slot
        return clone

    def assert_valid(self, ref: Ref, limit: int) -> None:
        if ref.is_input:
            if ref.in_idx >= self._in_cnt:
                raise ValueError(f"input reference {ref} out of range (in_cnt={self._in_cnt})")
        elif ref.op_idx >= limit:
            raise ValueError(f"operation reference {ref} must point before position {limit}")

    def _rnd_op(self, rng: random.Random) -> int:
        return rng.randint(0, self._repo.max_op())

    def _rnd_ref(self, rng: random.Random, limit: int) -> Ref:
        return Ref.random(rng, self._in_cnt, limit)

    def add_op(self, code: int, lhs: Ref, rhs: Ref) -> Ref:
        op_idx = len(self._ops)
        if code < 0 or code > self._repo.max_op():
            raise ValueError(f"operation code {code} out of range [0, {self._repo.max_op()}]")
        self.assert_valid(lhs, op_idx)
        self.assert_valid(rhs, op_idx)
        self._ops.append(Op(code, lhs, rhs))
        return Ref.op(op_idx)

    def add_forward(self, ref: Ref) -> Ref:
        return self.add_op(0, ref, Ref.nop())

    def grow(self, rng: random.Random, op_cnt: int) -> None:
        if op_cnt < self._out_cnt or op_cnt % self._out_cnt != 0:
            raise ValueError(f"op_cnt {op_cnt} must be a positive multiple of out_cnt {self._out_cnt}")
        while len(self._ops) < op_cnt:
            op_idx = len(self._ops)
            self.add_op(self._rnd_op(rng), self._rnd_ref(rng, op_idx), self._rnd_ref(rng, op_idx))

    def mutate(self, rng: random.Random) -> MutationKind:
        if not self._ops:
            raise ValueError("cannot mutate an empty program")
        mut_idx = rng.randint(0, len(self._ops) - 1)
        op = self._ops[mut_idx]
        kind = MutationKind(rng.randint(0, 2))
        if kind is MutationKind.CODE:
            op = replace(op, code=self._rnd_op(rng))
        elif kind is MutationKind.LHS:
            op = replace(op, lhs=self._rnd_ref(rng, mut_idx))
        else:
            op = replace(op, rhs=self._rnd_ref(rng, mut_idx))
        self._ops[mut_idx] = op
        return kind

    def reborn(self, gen: int) -> None:
        self._stats = replace(self._stats, born=gen)

    def outputs(self, slot: int) -> list[Ref]:
        offset = slot * self._out_cnt
        if slot < 0 or offset + self._out_cnt > len(self._ops):
            raise ValueError(f"slot {slot} out of range")
        return [Ref.op(offset + i) for i in range(self._out_cnt)]

    def get_cost(self, slot: int) -> int:
        """Total cost of the operations reachable from the outputs of ``slot``.

        Shared subexpressions are only counted once.
        """
        todo = self.outputs(slot)
        done = [False] * len(self._ops)
        cost = 0
        while todo:
            ref = todo.pop()
            if ref.is_operation and not done[ref.op_idx]:
                op = self._ops[ref.op_idx]
                cost += self._repo.cost_of(op.code)
                todo.append(op.lhs)
                if op.code > 0:
                    todo.append(op.rhs)
                done[ref.op_idx] = True
        return cost

    def size_of(self, ref: Ref) -> int:
        """Number of nodes in the fully expanded expression for ``ref``.

        Forward operations add no nodes. Shared subexpressions are counted
        once per use, so this may grow exponentially with program depth.
        """
        self.assert_valid(ref, len(self._ops))
        if ref.is_input:
            return 1
        sizes: list[int] = []
        for op in self._ops[: ref.op_idx + 1]:
            if op.code == 0:
                sizes.append(_size(sizes, op.lhs))
            else:
                sizes.append(1 + _size(sizes, op.lhs) + _size(sizes, op.rhs))
        return sizes[-1]

    def as_string(self, ref: Ref, limit: int = RENDER_LIMIT) -> str:
        expr_size = self.size_of(ref)
        if expr_size > limit:
            return f"expr({expr_size} nodes)"
        if ref.is_input:
            return str(ref)
        reachable: set[int] = set()
        todo = [ref]
        while todo:
            item = todo.pop()
            if item.is_operation and item.op_idx not in reachable:
                reachable.add(item.op_idx)
                op = self._ops[item.op_idx]
                todo.append(op.lhs)
                if op.code > 0:
                    todo.append(op.rhs)
        rendered: dict[int, str] = {}

        def render(item: Ref) -> str:
            return str(item) if item.is_input else rendered[item.op_idx]

        for op_idx in sorted(reachable):
            op = self._ops[op_idx]
            if op.code == 0:
                rendered[op_idx] = render(op.lhs)
            else:
                name = self._repo.name_of(op.code)
                rendered[op_idx] = f"{name}({render(op.lhs)},{render(op.rhs)})"
        return rendered[ref.op_idx]

    def describe(self, slot: int) -> list[str]:
        return [self.as_string(ref) for ref in self.outputs(slot)]

    # MultiFunction / Sim interface

    def num_inputs(self) -> int:
        return self._in_cnt

    def num_outputs(self) -> int:
        return self._out_cnt

    def num_alternatives(self) -> int:
        return len(self._ops) // self._out_cnt

    def execute(self, input: Input) -> Result:
        if len(input) != self._in_cnt:
            raise ValueError(f"expected {self._in_cnt} inputs, got {len(input)}")
        result: Result = []
        values: list[Value] = []
        for op in self._ops:
            values.append(
                self._repo.perform(op.code, _value(input, values, op.lhs), _value(input, values, op.rhs))
            )
            if len(values) % self._out_cnt == 0:
                result.append(values[-self._out_cnt :])
        return result

    def handle_feedback(self, feedback: Feedback) -> None:
        if len(feedback) != self.num_alternatives():
            raise ValueError(
                f"expected feedback for {self.num_alternatives()} alternatives, got {len(feedback)}"
            )
        if not feedback:
            raise ValueError("program has no complete slot to evaluate")
        born = self._stats.born
        best_slot = 0
        best = Stats(float(feedback[0]), self.get_cost(0), born)
        for slot in range(1, len(feedback)):
            stats = Stats(float(feedback[slot]), self.get_cost(slot), born)
            if stats < best:
                best = stats
                best_slot = slot
        self._stats = best
        self._best_slot = best_slot
