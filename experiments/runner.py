"""Experiment runner driving a population through its generations."""

from __future__ import annotations

import logging
import random
import signal
from datetime import datetime, timezone
from typing import Any

from tqdm import tqdm

from evaluator.tasks import build_task_repo
from gp_core.ops import make_seed
from gp_core.population import Population

from experiments.artifacts import ArtifactManager
from experiments.config import ExperimentConfig

logger = logging.getLogger(__name__)


class ExperimentRunner:
    """Coordinates task, population and artifacts for a complete run.

    Interrupts (Ctrl+C, SIGTERM) only set a flag; the loop checks it between
    ticks so a run always stops on a whole generation.
    """

    def __init__(self, config: ExperimentConfig, show_progress: bool = True):
        if config.seed is None:
            config = config.model_copy(update={"seed": make_seed(random.Random())})
        self.config = config
        self.show_progress = show_progress
        self.artifacts: ArtifactManager | None = None
        self.population: Population | None = None
        self.interrupted = False

    def _setup_signal_handlers(self) -> dict[int, Any]:
        """Setup graceful shutdown on Ctrl+C."""
        def signal_handler(signum: int, frame: Any) -> None:
            tqdm.write("\n⚠️  Interrupt received. Stopping after the current tick...")
            self.interrupted = True

        previous = {}
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.getsignal(signum)
            signal.signal(signum, signal_handler)
        return previous

    def run(self) -> dict[str, Any]:
        """Run the complete experiment.

        Returns:
            Summary dictionary with run statistics
        """
        repo = build_task_repo(self.config.task_name, self.config.operations)
        self.artifacts = ArtifactManager(self.config)
        self.artifacts.snapshot_config()

        logger.info(
            f"Starting run {self.config.run_id}: task={self.config.task_name} "
            f"seed={self.config.seed} ticks={self.config.max_ticks}"
        )
        previous_handlers = self._setup_signal_handlers()
        try:
            self.population = Population(self.config.params, repo, self.config.seed)
            status = self._run_loop(self.population)
        finally:
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)

        return self._finalize_run(self.population, status)

    def _record(self, population: Population) -> dict[str, object]:
        stats = population.get_generation_stats()
        stats["timestamp"] = datetime.now(timezone.utc).isoformat()
        self.artifacts.save_generation_metrics(stats)
        return stats

    def _run_loop(self, population: Population) -> str:
        """Run ticks until max_ticks, an interrupt, or the weakness target."""
        self._record(population)
        self._log_stats(population)
        if self._reached_target(population):
            return "solved"
        status = "completed"

        pbar = tqdm(
            range(self.config.max_ticks),
            desc="🧬 Evolution",
            unit="tick",
            ncols=100,
            disable=not self.show_progress,
        )

        for _ in pbar:
            if self.interrupted:
                tqdm.write(f"\n⚠️  Stopping at generation {population.generation}")
                status = "interrupted"
                break

            population.tick()
            best = population.best.stats
            pbar.set_postfix({"Weakness": f"{best.weakness:g}", "Cost": best.cost})

            if population.generation % self.config.report_interval == 0:
                self._record(population)
                self._log_stats(population)

            if self._reached_target(population):
                status = "solved"
                break

        pbar.close()
        if population.generation % self.config.report_interval != 0:
            self._record(population)
        return status

    def _reached_target(self, population: Population) -> bool:
        target = self.config.stop_at_weakness
        if target is None or population.best.stats.weakness > target:
            return False
        tqdm.write(f"  🔥 Target weakness reached at generation {population.generation}")
        return True

    def _log_stats(self, population: Population) -> None:
        stats = population.get_generation_stats()
        best = stats["best"]
        worst = stats["worst"]
        logger.info(
            f"[{stats['generation']}] best(weakness={best['weakness']:g},cost={best['cost']},age={best['age']}), "
            f"worst(weakness={worst['weakness']:g},cost={worst['cost']},age={worst['age']})"
        )

    def _finalize_run(self, population: Population, status: str) -> dict[str, Any]:
        """Finalize run and export best program."""
        best = population.best
        self.artifacts.export_best_program(best, population.generation)

        summary = {
            "run_id": self.config.run_id,
            "seed": self.config.seed,
            "status": status,
            "generations": population.generation,
            "best_weakness": best.stats.weakness,
            "best_cost": best.stats.cost,
            "best_slot": best.best_slot,
            "outputs": best.describe(best.best_slot),
            "artifacts": str(self.artifacts.run_dir),
        }
        logger.info(
            f"Best after {population.generation} ticks: "
            f"(weakness={best.stats.weakness:g},cost={best.stats.cost})"
        )
        return summary
