"""Artifact management for experiment runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gp_core.program import Program
from experiments.config import ExperimentConfig, save_config


class ArtifactManager:
    """Manages experiment artifacts: config snapshot, metrics and best program."""

    def __init__(self, config: ExperimentConfig):
        self.config = config
        self.run_dir = Path(config.artifact_dir) / config.run_id
        self.run_dir.mkdir(parents=True, exist_ok=True)

    @property
    def config_path(self) -> Path:
        return self.run_dir / "config.yaml"

    @property
    def metrics_path(self) -> Path:
        return self.run_dir / "metrics.jsonl"

    @property
    def best_program_path(self) -> Path:
        return self.run_dir / "best_program.txt"

    def snapshot_config(self) -> None:
        """Save a snapshot of the configuration for reproducibility.

        Metrics and the best program left by an earlier run with the same
        ``run_id`` are discarded so the run directory describes one run only.
        """
        save_config(self.config, self.config_path)
        self.metrics_path.unlink(missing_ok=True)
        self.best_program_path.unlink(missing_ok=True)

    def save_generation_metrics(self, stats: dict[str, Any]) -> None:
        metrics_entry = {
            "generation": stats.get("generation"),
            "timestamp": stats.get("timestamp", datetime.now(timezone.utc).isoformat()),
            **{k: v for k, v in stats.items() if k not in ["generation", "timestamp"]}
        }

        with open(self.metrics_path, "a") as f:
            f.write(json.dumps(metrics_entry) + "\n")

    def export_best_program(self, program: Program, generation: int) -> None:
        """Export the best program as rendered output expressions plus its raw operations.

        Args:
            program: Best program to export
            generation: Generation the run stopped at
        """
        stats = program.stats
        slot = program.best_slot
        lines = [
            f"# Best program from run: {self.config.run_id}",
            f"# Generated at: {datetime.now(timezone.utc).isoformat()}",
            f"# Weakness: {stats.weakness:g}",
            f"# Cost: {stats.cost}",
            f"# Age: {generation - stats.born}",
            f"# Slot: {slot}",
            "",
        ]
        for out_idx, ref in enumerate(program.outputs(slot)):
            lines.append(f"out{out_idx} (size={program.size_of(ref)}): {program.as_string(ref)}")
        lines.append("")
        for op_idx, op in enumerate(program.ops):
            lines.append(f"@{op_idx} = {program.repo.name_of(op.code)} {op.lhs} {op.rhs}")

        with open(self.best_program_path, "w") as f:
            f.write("\n".join(lines) + "\n")

    def load_metrics(self) -> list[dict[str, Any]]:
        """Load all generation metrics from JSONL file.

        Returns:
            List of metric dictionaries, one per reported generation
        """
        if not self.metrics_path.exists():
            return []

        metrics = []
        with open(self.metrics_path, "r") as f:
            for line in f:
                if line.strip():
                    metrics.append(json.loads(line))

        return metrics

    def get_summary(self) -> dict[str, Any]:
        metrics = self.load_metrics()

        if not metrics:
            return {
                "run_id": self.config.run_id,
                "status": "no_data",
                "generations_completed": 0
            }

        last_gen = metrics[-1]
        best_weakness = min(m["best"]["weakness"] for m in metrics)

        return {
            "run_id": self.config.run_id,
            "status": "completed" if last_gen.get("generation", 0) >= self.config.max_ticks else "in_progress",
            "generations_completed": last_gen.get("generation"),
            "max_ticks": self.config.max_ticks,
            "best_weakness": best_weakness,
            "last_timestamp": last_gen.get("timestamp"),
            "has_best_program": self.best_program_path.exists()
        }
