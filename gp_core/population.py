from __future__ import annotations

import logging
import random
from collections.abc import Callable

from .ops import OpRepo
from .program import Program, Stats
from .schemas import Params
from .selection import BiasedPrefixSelection, SelectionStrategy

logger = logging.getLogger(__name__)


def _stats_key(program: Program) -> tuple[float, int, int]:
    return program.stats.sort_key()


class Population:
    """Fixed-size population of programs kept sorted best-first.

    Each tick keeps the elite prefix, refills the population with mutated
    copies of elite parents and sorts again. The population owns its random
    stream and hands it to the selection strategy it builds, so ``seed``
    makes a run reproducible.
    """

    def __init__(
        self,
        params: Params,
        repo: OpRepo,
        seed: int,
        selection_factory: Callable[[random.Random], SelectionStrategy] = BiasedPrefixSelection,
    ) -> None:
        self._rng: random.Random = random.Random(seed)
        self._gen: int = 0
        self.params: Params = params
        self.repo: OpRepo = repo
        self.seed: int = seed
        self.selection_strategy: SelectionStrategy = selection_factory(self._rng)
        self._programs: list[Program] = []
        self.grow()

    def __len__(self) -> int:
        return len(self._programs)

    @property
    def generation(self) -> int:
        return self._gen

    @property
    def programs(self) -> tuple[Program, ...]:
        return tuple(self._programs)

    @property
    def best(self) -> Program:
        return self._programs[0]

    @property
    def worst(self) -> Program:
        return self._programs[-1]

    @property
    def elite_count(self) -> int:
        return self.params.elite_count

    def grow(self) -> None:
        while len(self._programs) < self.params.pop_cnt:
            program = Program(self.repo, self.params.in_cnt, self.params.out_cnt, self._gen)
            program.grow(self._rng, self.params.op_cnt)
            self.repo.find_weakness(program)
            self._programs.append(program)
        self._sort()
        logger.debug(f"Grew population to {len(self._programs)} programs (seed={self.seed})")

    def select(self, limit: int) -> Program:
        return self.selection_strategy.select(self._programs, limit)

    def mutate(self, program: Program) -> Program:
        new_program = program.copy()
        new_program.mutate(self._rng)
        while self._rng.randint(0, 99) < self.params.continue_mutation_pct:
            new_program.mutate(self._rng)
        new_program.reborn(self._gen)
        return new_program

    def tick(self) -> None:
        self._gen += 1
        apex_cnt = self.elite_count
        del self._programs[apex_cnt:]
        while len(self._programs) < self.params.pop_cnt:
            child = self.mutate(self.select(apex_cnt))
            self.repo.find_weakness(child)
            self._programs.append(child)
        self._sort()
        best = self.best.stats
        logger.debug(f"[{self._gen}] best weakness={best.weakness:g} cost={best.cost}")

    def _sort(self) -> None:
        self._programs.sort(key=_stats_key)

    def get_generation_stats(self) -> dict[str, object]:
        best: Stats = self.best.stats
        worst: Stats = self.worst.stats
        return {
            "generation": self._gen,
            "best": {
                "weakness": best.weakness,
                "cost": best.cost,
                "age": self._gen - best.born,
            },
            "worst": {
                "weakness": worst.weakness,
                "cost": worst.cost,
                "age": self._gen - worst.born,
            },
        }
