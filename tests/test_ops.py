from __future__ import annotations

import random

import pytest

from evaluator.arithmetic import (
    DEFAULT_OPERATIONS,
    build_repo,
    int_add,
    int_div,
    int_mod,
    int_mul,
    int_pow,
    wrap_int32,
)
from gp_core.ops import INT32_MAX, INT32_MIN, OpRepo, make_seed


class RecordingSim:
    def __init__(self) -> None:
        self.feedback: list[float] | None = None

    def num_inputs(self) -> int:
        return 1

    def num_outputs(self) -> int:
        return 1

    def num_alternatives(self) -> int:
        return 2

    def execute(self, input: list[int]) -> list[list[int]]:
        return [[input[0]], [input[0] + 1]]

    def handle_feedback(self, feedback: list[float]) -> None:
        self.feedback = list(feedback)


class TestOpRepo:
    def test_forward_is_builtin_and_free(self) -> None:
        repo = OpRepo(lambda fun: [])
        assert repo.max_op() == 0
        assert repo.name_of(0) == "forward"
        assert repo.cost_of(0) == 0
        assert repo.perform(0, 5, 9) == 5

    def test_add_is_chainable_with_unit_cost(self) -> None:
        repo = OpRepo(lambda fun: []).add("add", int_add).add("mul", int_mul)
        assert repo.max_op() == 2
        assert len(repo) == 3
        assert repo.names() == ["forward", "add", "mul"]
        assert repo.cost_of(1) == repo.cost_of(2) == 1
        assert repo.perform(2, 6, 7) == 42
        assert repo.code_of("mul") == 2

    def test_lookups_fail_out_of_range(self) -> None:
        repo = OpRepo(lambda fun: []).add("add", int_add)
        with pytest.raises(IndexError):
            repo.name_of(2)
        with pytest.raises(IndexError):
            repo.cost_of(-1)
        with pytest.raises(KeyError):
            repo.code_of("pow")
        with pytest.raises(IndexError):
            repo.perform(-1, 2, 3)
        with pytest.raises(IndexError):
            repo.perform(2, 2, 3)

    def test_find_weakness_feeds_result_back(self) -> None:
        calls = []

        def hook(fun: object) -> list[float]:
            calls.append(fun)
            return [3.0, 1.0]

        sim = RecordingSim()
        OpRepo(hook).find_weakness(sim)
        assert calls == [sim]
        assert sim.feedback == [3.0, 1.0]


def test_make_seed_is_int32() -> None:
    rng = random.Random(0)
    for _ in range(100):
        assert INT32_MIN <= make_seed(rng) <= INT32_MAX


class TestArithmetic:
    def test_division_by_zero_is_zero(self) -> None:
        assert int_div(7, 0) == 0
        assert int_mod(7, 0) == 0

    def test_unrepresentable_quotient_is_zero(self) -> None:
        assert int_div(INT32_MIN, -1) == 0
        assert int_mod(INT32_MIN, -1) == 0

    def test_division_truncates_toward_zero(self) -> None:
        assert int_div(-7, 2) == -3
        assert int_div(7, -2) == -3
        assert int_mod(-7, 2) == -1
        assert int_mod(7, -2) == 1

    def test_overflow_wraps(self) -> None:
        assert int_add(INT32_MAX, 1) == INT32_MIN
        assert int_mul(65536, 65536) == 0
        assert wrap_int32(2**32 + 5) == 5

    def test_pow(self) -> None:
        assert int_pow(2, 10) == 1024
        assert int_pow(-3, 3) == -27
        assert int_pow(0, 0) == 1
        assert int_pow(2, -1) == 0
        assert int_pow(0, -2) == 0
        assert int_pow(1, -5) == 1
        assert int_pow(-1, -3) == -1
        assert int_pow(2, 31) == INT32_MIN

    def test_operations_are_total(self) -> None:
        values = [INT32_MIN, -7, -1, 0, 1, 2, 7, INT32_MAX]
        for fun in DEFAULT_OPERATIONS.values():
            for a in values:
                for b in values:
                    assert INT32_MIN <= fun(a, b) <= INT32_MAX

    def test_build_repo_in_requested_order(self) -> None:
        repo = build_repo(lambda fun: [], ["mul", "add"])
        assert repo.names() == ["forward", "mul", "add"]

    def test_build_repo_defaults_to_all_operations(self) -> None:
        repo = build_repo(lambda fun: [])
        assert repo.names()[1:] == list(DEFAULT_OPERATIONS)

    def test_build_repo_rejects_unknown_operation(self) -> None:
        with pytest.raises(ValueError):
            build_repo(lambda fun: [], ["add", "sqrt"])
