"""Three dice, one fair 24-sided outcome.

Problem: https://www.research.ibm.com/haifa/ponderthis/challenges/November2017.html

Three six-sided dice are rolled and sorted (``a <= b <= c``). A program
must map the roll to ``(x, y, z)`` such that the bucket
``(x & 1, y & 1, z % 6)`` is uniformly distributed over all 24 buckets,
i.e. every bucket is hit by exactly 9 of the 216 possible rolls.
Constants may be modelled as extra inputs: programs with six inputs also
receive ``2, 1502, 70677``.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from gp_core.ops import MultiFunction, OpRepo
from gp_core.program import Program, Ref

from .base import BaseEvaluator

DICE_FACES = 6
NUM_DICE = 3
NUM_BUCKETS = 2 * 2 * 6
TARGET_PER_BUCKET = DICE_FACES**NUM_DICE // NUM_BUCKETS
CONSTANTS = (2, 1502, 70677)
NUM_OUTPUTS = 3

_SIZE_T_MODULUS = 2**64


@dataclass
class Dist:
    """Histogram of samples over the 24 buckets."""

    slots: list[int] = field(default_factory=lambda: [0] * NUM_BUCKETS)

    def sample(self, x: int, y: int, z: int) -> None:
        post_x = x & 1
        post_y = y & 1
        # negative values are reinterpreted as unsigned 64-bit first
        post_z = (z % _SIZE_T_MODULUS) % DICE_FACES
        self.slots[(post_z << 2) | (post_y << 1) | post_x] += 1

    def error(self) -> int:
        return sum(abs(count - TARGET_PER_BUCKET) for count in self.slots)


def dice_inputs(num_inputs: int) -> list[list[int]]:
    if num_inputs not in (NUM_DICE, NUM_DICE + len(CONSTANTS)):
        raise ValueError(f"dice programs take 3 or 6 inputs, not {num_inputs}")
    inputs = []
    for roll in itertools.product(range(1, DICE_FACES + 1), repeat=NUM_DICE):
        input = sorted(roll)
        if num_inputs > NUM_DICE:
            input.extend(CONSTANTS)
        inputs.append(input)
    return inputs


class DiceEvaluator(BaseEvaluator):
    """Weakness is the total distance of the bucket histogram from uniform."""

    def find_weakness(self, fun: MultiFunction) -> list[float]:
        state = [Dist() for _ in range(fun.num_alternatives())]
        for input in dice_inputs(fun.num_inputs()):
            result = fun.execute(input)
            if len(result) != len(state):
                raise ValueError(f"expected {len(state)} alternatives, got {len(result)}")
            for dist, output in zip(state, result):
                if len(output) != NUM_OUTPUTS:
                    raise ValueError(f"expected {NUM_OUTPUTS} outputs, got {len(output)}")
                dist.sample(*output)
        return [float(dist.error()) for dist in state]


def build_reference_solution(repo: OpRepo) -> Program:
    """Hand-crafted solution (Bert Dobbelaere), laid out as four slots.

    d = 2 ** (((c - a) * (c + a)) / 2)
    x = 1502 / d, y = 70677 / d, z = a + b + c

    The second slot is a zero-cost forward layer realigning the first
    three results; only the last slot solves the problem.
    """
    add_id = repo.code_of("add")
    sub_id = repo.code_of("sub")
    mul_id = repo.code_of("mul")
    div_id = repo.code_of("div")
    pow_id = repo.code_of("pow")

    prog = Program(repo, NUM_DICE + len(CONSTANTS), NUM_OUTPUTS)
    a, b, c = Ref.input(0), Ref.input(1), Ref.input(2)
    k1, k2, k3 = Ref.input(3), Ref.input(4), Ref.input(5)
    # slot 0
    _1 = prog.add_op(sub_id, c, a)
    _2 = prog.add_op(add_id, c, a)
    _3 = prog.add_op(mul_id, _1, _2)
    # slot 1
    _1 = prog.add_forward(_1)
    _2 = prog.add_forward(_2)
    _3 = prog.add_forward(_3)
    # slot 2
    _4 = prog.add_op(div_id, _3, k1)
    d = prog.add_op(pow_id, k1, _4)
    _5 = prog.add_op(add_id, a, b)
    # slot 3
    prog.add_op(div_id, k2, d)
    prog.add_op(div_id, k3, d)
    prog.add_op(add_id, _5, c)
    return prog
