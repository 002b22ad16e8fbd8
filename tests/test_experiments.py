"""Tests for experiment configuration, artifacts, and runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from evaluator.arithmetic import build_repo
from evaluator.dice import DiceEvaluator, build_reference_solution
from experiments.artifacts import ArtifactManager
from experiments.config import ExperimentConfig, load_config, save_config
from experiments.runner import ExperimentRunner


def _config(tmp_path: Path, **overrides: object) -> ExperimentConfig:
    data: dict[str, object] = {
        "run_id": "test_run",
        "seed": 42,
        "max_ticks": 5,
        "report_interval": 2,
        "task_name": "squares",
        "params": {"in_cnt": 2, "out_cnt": 1, "op_cnt": 4, "pop_cnt": 10},
        "artifact_dir": str(tmp_path / "artifacts"),
    }
    data.update(overrides)
    return ExperimentConfig.from_dict(data)


class TestExperimentConfig:
    def test_load_config_from_yaml(self, tmp_path: Path) -> None:
        config_path = tmp_path / "test_config.yaml"
        config_data = {
            "run_id": "test_run_001",
            "seed": 42,
            "max_ticks": 1000,
            "task_name": "dice",
            "operations": ["add", "sub"],
            "stop_at_weakness": 0.0,
            "params": {"in_cnt": 3, "out_cnt": 3, "op_cnt": 33, "pop_cnt": 100},
            "artifact_dir": "artifacts",
        }

        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = load_config(config_path)

        assert config.run_id == "test_run_001"
        assert config.seed == 42
        assert config.max_ticks == 1000
        assert config.report_interval == 100
        assert config.operations == ["add", "sub"]
        assert config.stop_at_weakness == 0.0
        assert config.params.op_cnt == 33
        assert config.params.elite_count == 10

    def test_load_config_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_load_config_invalid(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("run_id: x\nmax_ticks: -1\n")
        with pytest.raises(ValueError):
            load_config(config_path)

    def test_load_config_empty(self, tmp_path: Path) -> None:
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        with pytest.raises(ValueError):
            load_config(config_path)

    def test_save_config_round_trip(self, tmp_path: Path) -> None:
        config = _config(tmp_path)
        config_path = tmp_path / "saved" / "config.yaml"
        save_config(config, config_path)

        assert config_path.exists()
        assert load_config(config_path) == config

    def test_shipped_configs_load(self) -> None:
        configs_dir = Path(__file__).resolve().parent.parent / "configs"
        for path in sorted(configs_dir.glob("*.yaml")):
            config = load_config(path)
            assert config.task_name in {"dice", "squares"}


class TestArtifactManager:
    def test_export_best_program(self, tmp_path: Path) -> None:
        artifacts = ArtifactManager(_config(tmp_path))
        repo = build_repo(DiceEvaluator())
        prog = build_reference_solution(repo)
        repo.find_weakness(prog)

        artifacts.export_best_program(prog, generation=3)

        content = artifacts.best_program_path.read_text()
        assert "# Weakness: 0" in content
        assert "# Cost: 9" in content
        assert "# Slot: 3" in content
        assert "out2 (size=5): add(add(i0,i1),i2)" in content
        assert "@3 = forward @0 i0" in content

    def test_metrics_append_and_summary(self, tmp_path: Path) -> None:
        artifacts = ArtifactManager(_config(tmp_path))
        assert artifacts.get_summary()["status"] == "no_data"

        for gen, weakness in [(0, 9.0), (5, 4.0)]:
            artifacts.save_generation_metrics(
                {
                    "generation": gen,
                    "best": {"weakness": weakness, "cost": 2, "age": 0},
                    "worst": {"weakness": 20.0, "cost": 4, "age": 0},
                }
            )

        metrics = artifacts.load_metrics()
        assert [m["generation"] for m in metrics] == [0, 5]
        summary = artifacts.get_summary()
        assert summary["status"] == "completed"
        assert summary["best_weakness"] == 4.0


class TestExperimentRunner:
    def test_run_writes_artifacts(self, tmp_path: Path) -> None:
        config = _config(tmp_path)
        summary = ExperimentRunner(config, show_progress=False).run()

        assert summary["status"] == "completed"
        assert summary["generations"] == 5
        assert summary["seed"] == 42
        assert len(summary["outputs"]) == 1

        run_dir = Path(summary["artifacts"])
        assert (run_dir / "config.yaml").exists()
        assert (run_dir / "best_program.txt").exists()
        lines = (run_dir / "metrics.jsonl").read_text().splitlines()
        assert [json.loads(line)["generation"] for line in lines] == [0, 2, 4, 5]

    def test_run_stops_at_target_weakness(self, tmp_path: Path) -> None:
        config = _config(tmp_path, stop_at_weakness=1e12)
        summary = ExperimentRunner(config, show_progress=False).run()
        assert summary["status"] == "solved"
        assert summary["generations"] == 0
        lines = (Path(summary["artifacts"]) / "metrics.jsonl").read_text().splitlines()
        assert [json.loads(line)["generation"] for line in lines] == [0]

    def test_rerun_replaces_previous_artifacts(self, tmp_path: Path) -> None:
        ExperimentRunner(_config(tmp_path, seed=1), show_progress=False).run()
        runner = ExperimentRunner(_config(tmp_path, seed=2), show_progress=False)
        runner.run()

        metrics = runner.artifacts.load_metrics()
        assert [m["generation"] for m in metrics] == [0, 2, 4, 5]
        assert load_config(runner.artifacts.config_path).seed == 2

    def test_seed_is_drawn_and_recorded(self, tmp_path: Path) -> None:
        config = _config(tmp_path, seed=None, max_ticks=1)
        runner = ExperimentRunner(config, show_progress=False)
        assert runner.config.seed is not None
        runner.run()
        snapshot = load_config(runner.artifacts.config_path)
        assert snapshot.seed == runner.config.seed

    def test_interrupt_stops_between_ticks(self, tmp_path: Path) -> None:
        runner = ExperimentRunner(_config(tmp_path), show_progress=False)
        runner.interrupted = True
        summary = runner.run()
        assert summary["status"] == "interrupted"
        assert summary["generations"] == 0

    def test_same_seed_same_result(self, tmp_path: Path) -> None:
        first = ExperimentRunner(_config(tmp_path, run_id="a"), show_progress=False).run()
        second = ExperimentRunner(_config(tmp_path, run_id="b"), show_progress=False).run()
        assert first["best_weakness"] == second["best_weakness"]
        assert first["outputs"] == second["outputs"]

    def test_unknown_task_fails(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            ExperimentRunner(_config(tmp_path, task_name="nope"), show_progress=False).run()
        assert not (tmp_path / "artifacts" / "test_run").exists()
