"""CLI interface for running experiments."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
import yaml

from evaluator.tasks import TASKS
from experiments.config import ExperimentConfig, load_config
from experiments.runner import ExperimentRunner

app = typer.Typer(help="GP Synthesis Experiment CLI")


@app.command()
def run(
    config_path: str = typer.Argument(..., help="Path to experiment YAML config"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Override the configured seed"),
    max_ticks: Optional[int] = typer.Option(None, "--max-ticks", help="Override the number of ticks"),
    quiet: bool = typer.Option(False, "--quiet", help="Hide the progress bar"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log generation statistics"),
) -> None:
    """Run a complete experiment from config file."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(config_path)
        overrides: dict[str, object] = {}
        if seed is not None:
            overrides["seed"] = seed
        if max_ticks is not None:
            overrides["max_ticks"] = max_ticks
        if overrides:
            config = ExperimentConfig.model_validate({**config.model_dump(), **overrides})
        runner = ExperimentRunner(config, show_progress=not quiet)
        summary = runner.run()
    except FileNotFoundError as e:
        typer.secho(f"❌ Config file not found: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.secho(f"❌ Invalid config: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if summary["status"] == "interrupted":
        typer.secho("\n⚠️  Experiment interrupted", fg=typer.colors.YELLOW)
    else:
        typer.secho(f"\n✅ Experiment {summary['status']}!", fg=typer.colors.GREEN)
    typer.echo(f"   Seed:       {summary['seed']}")
    typer.echo(f"   Ticks:      {summary['generations']}")
    typer.echo(f"   Weakness:   {summary['best_weakness']:g}")
    typer.echo(f"   Cost:       {summary['best_cost']}")
    for idx, expr in enumerate(summary["outputs"]):
        typer.echo(f"   out{idx}:       {expr}")
    typer.echo(f"   Artifacts:  {summary['artifacts']}")


@app.command()
def show_best(
    run_id: str = typer.Argument(..., help="Run ID to show the best program of"),
    artifact_dir: str = typer.Option("artifacts", help="Artifacts directory"),
) -> None:
    """Show the best program exported by a run."""
    best_program_path = Path(artifact_dir) / run_id / "best_program.txt"

    if not best_program_path.exists():
        typer.secho(f"❌ No best program found for run: {run_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    typer.echo(best_program_path.read_text())


@app.command()
def list_runs(
    artifact_dir: str = typer.Option("artifacts", help="Artifacts directory"),
) -> None:
    """List all experiment runs in artifacts directory."""
    artifacts_path = Path(artifact_dir)

    if not artifacts_path.exists():
        typer.secho(f"❌ Artifacts directory not found: {artifact_dir}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    run_dirs = [d for d in artifacts_path.iterdir() if d.is_dir()]

    if not run_dirs:
        typer.secho("No runs found.", fg=typer.colors.YELLOW)
        return

    typer.secho(f"\n📁 Found {len(run_dirs)} run(s):\n", fg=typer.colors.BLUE)

    for run_dir in sorted(run_dirs):
        config_path = run_dir / "config.yaml"
        task = "?"
        if config_path.exists():
            with open(config_path, "r") as f:
                task = (yaml.safe_load(f) or {}).get("task_name", "?")
        typer.echo(f"  {run_dir.name}  (task: {task})")


@app.command()
def tasks() -> None:
    """List the available tasks."""
    for name in sorted(TASKS):
        task = TASKS[name]
        typer.echo(f"  {name:<10} {task.description}")
        typer.echo(f"  {'':<10} ops: {' '.join(task.default_operations)}")


if __name__ == "__main__":
    app()
