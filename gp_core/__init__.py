"""
GP Core Module

Engine for evolving small integer programs.

This module implements the genetic programming core:
- Operation catalog with pluggable fitness hook
- Programs as flat DAGs of binary operations with cost/size/string analyses
- Biased parent selection from the elite prefix
- Generational population loop with elitism and multi-mutation
"""

__version__ = "0.1.0"

from .ops import MultiFunction, OpRepo, Sim, make_seed
from .population import Population
from .program import MutationKind, Op, Program, Ref, Stats
from .schemas import Params, RunConfig

__all__ = [
    "MultiFunction",
    "MutationKind",
    "Op",
    "OpRepo",
    "Params",
    "Population",
    "Program",
    "Ref",
    "RunConfig",
    "Sim",
    "Stats",
    "make_seed",
]
