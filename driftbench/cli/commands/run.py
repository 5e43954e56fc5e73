"""Run command: execute drift experiments for one or all strategies."""

import time
from functools import partial
from pathlib import Path

import typer

from ..app import app, console, get_json_mode
from ..utils import ExitCode, Output, format_elapsed, setup_logging
from ...config import get_config
from ...core import llm
from ...core.models import ALL_STRATEGIES, AtypicalityLevel
from ...core.usage import UsageTracker
from ...experiment import load_requests, load_template, run_experiment, run_id_for
from ...storage import ArtifactStore
from ...strategies import get_strategy

_STRATEGY_HELP = """\
incremental      = baseline (no validation)
repair           = incremental + retry loop
regeneration     = regenerate from template
regen-reconcile  = regeneration + reconciliation
regen-full       = reconciliation + retries"""


@app.command("run")
def run_command(
    strategy: str = typer.Option(
        "incremental",
        "--strategy",
        "-s",
        help='Strategy: incremental, repair, regeneration, regen-reconcile, regen-full, or "all"',
    ),
    runs: int | None = typer.Option(
        None, "--runs", "-r", min=1, help="Number of runs per strategy"
    ),
    iterations: int | None = typer.Option(
        None, "--iterations", "-i", min=1, help="Iterations per run"
    ),
    atypicality: str | None = typer.Option(
        None,
        "--atypicality",
        "-a",
        help="Atypicality level: none, word-initial, third-char (or low, mid, high)",
    ),
    template: Path | None = typer.Option(
        None, "--template", "-t", help="Base template document (markdown)"
    ),
    requests: Path | None = typer.Option(
        None, "--requests", help="Change requests file (JSON list or YAML)"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Runs directory for artifacts and metrics"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-iteration logs"),
    debug: bool = typer.Option(False, "--debug", help="Show debug logs"),
):
    """Run drift experiments.

    Examples:
        driftbench run -s repair -i 15 --template data/blueprint.md --requests data/patches.json
        driftbench run -s all -r 3 -a high
    """
    setup_logging(console, verbose=verbose, debug=debug)
    out = Output(console=console, json_mode=get_json_mode())
    config = get_config()

    # Validate configuration before any generation call
    try:
        if strategy == "all":
            strategies = list(ALL_STRATEGIES)
        else:
            strategies = [get_strategy(strategy)]
        level = AtypicalityLevel.parse(atypicality or config.experiment.atypicality)
    except ValueError as e:
        out.error(str(e), exit_code=ExitCode.VALIDATION_ERROR)
        raise typer.Exit(out.finish())

    runs = runs or config.experiment.runs
    iterations = iterations or config.experiment.iterations
    template_path = template or Path(config.experiment.template_path)
    requests_path = requests or Path(config.experiment.requests_path)
    runs_dir = output or Path(config.experiment.runs_dir)

    try:
        base_template = load_template(template_path)
        change_requests = load_requests(requests_path)
    except FileNotFoundError as e:
        out.error(str(e), exit_code=ExitCode.FILE_NOT_FOUND)
        raise typer.Exit(out.finish())
    except ValueError as e:
        out.error(str(e), exit_code=ExitCode.INPUT_ERROR)
        raise typer.Exit(out.finish())

    tiers = [llm.ModelTier.FAST]
    if any(s.reconciles for s in strategies):
        tiers.append(llm.ModelTier.STRONG)
    try:
        for tier in tiers:
            llm.resolve_tier(tier)
    except ValueError as e:
        out.error(
            f"Model configuration error ({tier.value} tier): {e}",
            suggestion="Check models.fast / models.strong and the provider API key",
            exit_code=ExitCode.VALIDATION_ERROR,
        )
        raise typer.Exit(out.finish())

    if iterations > len(change_requests):
        out.warning(
            f"Only {len(change_requests)} change requests; "
            f"running {len(change_requests)} iterations instead of {iterations}"
        )

    if not get_json_mode():
        console.print()
        console.print("[bold]Architectural Drift Experiment Benchmark[/bold]")
        out.divider()
        console.print(_STRATEGY_HELP, markup=False)
        out.divider()
        console.print(f"Running:     {', '.join(s.value for s in strategies)}")
        console.print(f"Runs:        {runs}")
        console.print(f"Iterations:  {min(iterations, len(change_requests))}")
        console.print(f"Atypicality: {level.value}")
        console.print()

    usage = UsageTracker()
    generator = partial(
        llm.generate, temperature=config.experiment.temperature, usage=usage
    )
    store = ArtifactStore(runs_dir)
    start_time = time.time()
    results = []

    for strat in strategies:
        if not get_json_mode():
            console.print(f"[bold cyan]STRATEGY: {strat.value.upper()}[/bold cyan]")

        for run in range(1, runs + 1):
            run_id = run_id_for(run)
            try:
                metrics = run_experiment(
                    strategy=strat,
                    template=base_template,
                    requests=change_requests,
                    iterations=iterations,
                    generator=generator,
                    run_id=run_id,
                    atypicality=level,
                    store=store,
                )
            except Exception as e:
                out.error(
                    f"Generation failed during {strat.value} {run_id}: "
                    f"{type(e).__name__}: {e}",
                    exit_code=ExitCode.GENERATION_ERROR,
                )
                raise typer.Exit(out.finish())

            results.append(
                {
                    "strategy": strat.value,
                    "run_id": run_id,
                    "final_drift": metrics.final_drift,
                    "total_retries": metrics.total_retries,
                    "converged": metrics.converged_count,
                    "iterations": len(metrics.iterations),
                }
            )
            out.success(
                f"{strat.value} {run_id}: final drift {metrics.final_drift}, "
                f"retries {metrics.total_retries}, "
                f"converged {metrics.converged_count}/{len(metrics.iterations)}"
            )

    out.set_data("runs", results)
    out.set_data("runs_dir", str(runs_dir))
    out.set_data("usage", usage.summary())

    if not get_json_mode():
        console.print()
        console.print(
            f"All experiments completed in {format_elapsed(time.time() - start_time)}. "
            f"Results saved to: [bold]{runs_dir}[/bold]"
        )
        if verbose and (line := usage.summary_line()):
            console.print(f"[dim]Usage: {line}[/dim]")

    raise typer.Exit(out.finish())
