"""Registry of runnable tasks: evaluator plus default operation set."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable

from gp_core.ops import OpRepo

from .arithmetic import DEFAULT_OPERATIONS, build_repo
from .base import BaseEvaluator
from .dice import DiceEvaluator
from .regression import RegressionEvaluator, grid_samples


@dataclass(frozen=True)
class Task:
    name: str
    evaluator_factory: Callable[[], BaseEvaluator]
    default_operations: tuple[str, ...]
    description: str = ""


def _difference_of_squares() -> BaseEvaluator:
    return RegressionEvaluator(
        lambda a, b: ((a - b) * (a + b),),
        grid_samples(2, -4, 4),
    )


TASKS: dict[str, Task] = {
    "dice": Task(
        name="dice",
        evaluator_factory=DiceEvaluator,
        default_operations=tuple(DEFAULT_OPERATIONS),
        description="Map three sorted dice to a uniform 24-way outcome",
    ),
    "squares": Task(
        name="squares",
        evaluator_factory=_difference_of_squares,
        default_operations=("add", "sub", "mul"),
        description="Rediscover (a - b) * (a + b) from samples",
    ),
}


def get_task(name: str) -> Task:
    try:
        return TASKS[name]
    except KeyError:
        raise ValueError(f"Unknown task: {name}. Available: {', '.join(sorted(TASKS))}") from None


def build_task_repo(name: str, operations: Sequence[str] | None = None) -> OpRepo:
    task = get_task(name)
    names = list(operations) if operations else list(task.default_operations)
    return build_repo(task.evaluator_factory(), names)
