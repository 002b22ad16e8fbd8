"""Standard 32-bit integer operations.

Every operation is total: results wrap around to signed 32-bit values and
operations without a defined result (division by zero, ``INT32_MIN / -1``,
``0 ** -n``) return 0 instead of failing.
"""

from __future__ import annotations

from collections.abc import Sequence

from gp_core.ops import INT32_MIN, FeedbackFn, OpRepo, ValueOp2

_MODULUS = 2**32


def wrap_int32(value: int) -> int:
    return ((value - INT32_MIN) % _MODULUS) + INT32_MIN


def div_ok(a: int, b: int) -> bool:
    if a == INT32_MIN and b == -1:
        return False
    return b != 0


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def int_add(a: int, b: int) -> int:
    return wrap_int32(a + b)


def int_sub(a: int, b: int) -> int:
    return wrap_int32(a - b)


def int_mul(a: int, b: int) -> int:
    return wrap_int32(a * b)


def int_div(a: int, b: int) -> int:
    return _trunc_div(a, b) if div_ok(a, b) else 0


def int_mod(a: int, b: int) -> int:
    # sign follows the dividend
    return a - b * _trunc_div(a, b) if div_ok(a, b) else 0


def int_pow(a: int, b: int) -> int:
    if b >= 0:
        return wrap_int32(pow(a, b, _MODULUS))
    # negative exponents: truncate the real result toward zero
    if a == 1:
        return 1
    if a == -1:
        return 1 if b % 2 == 0 else -1
    return 0


def int_and(a: int, b: int) -> int:
    return a & b


def int_or(a: int, b: int) -> int:
    return a | b


def int_xor(a: int, b: int) -> int:
    return a ^ b


DEFAULT_OPERATIONS: dict[str, ValueOp2] = {
    "add": int_add,
    "sub": int_sub,
    "mul": int_mul,
    "div": int_div,
    "mod": int_mod,
    "pow": int_pow,
    "and": int_and,
    "or": int_or,
    "xor": int_xor,
}


def build_repo(find_weakness: FeedbackFn, names: Sequence[str] | None = None) -> OpRepo:
    """Build an operation catalog from the standard operations, in the given order."""
    repo = OpRepo(find_weakness)
    for name in names if names is not None else DEFAULT_OPERATIONS:
        if name not in DEFAULT_OPERATIONS:
            raise ValueError(f"Unknown operation: {name}")
        repo.add(name, DEFAULT_OPERATIONS[name])
    return repo
