"""
Evaluator Module

Fitness hooks and operation sets for the GP engine.

This module provides:
- Abstract evaluator interface (one weakness per alternative)
- Total 32-bit integer operations
- Three-dice uniform outcome problem and its hand-crafted solution
- Symbolic regression against a target function
- Task registry used by the experiment runner
"""

__version__ = "0.1.0"

from .arithmetic import DEFAULT_OPERATIONS, build_repo
from .base import BaseEvaluator
from .dice import DiceEvaluator, build_reference_solution
from .regression import RegressionEvaluator, grid_samples
from .tasks import TASKS, Task, build_task_repo, get_task

__all__ = [
    "DEFAULT_OPERATIONS",
    "build_repo",
    "BaseEvaluator",
    "DiceEvaluator",
    "build_reference_solution",
    "RegressionEvaluator",
    "grid_samples",
    "TASKS",
    "Task",
    "build_task_repo",
    "get_task",
]
