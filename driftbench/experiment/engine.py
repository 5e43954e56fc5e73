"""Experiment runner.

Drives one strategy across the ordered change requests. Each iteration
gets the artifact produced by the previous one plus the accumulated
request history, runs exactly one strategy step, and persists the
resulting artifact and metrics. Iterations run strictly in order; a
generation failure aborts the rest of the run.
"""

import logging
from dataclasses import dataclass, field

from ..core.llm import GenerateFn
from ..core.models import (
    AtypicalityLevel,
    IterationMetrics,
    RunMetrics,
    Strategy,
    StrategyResult,
)
from ..storage import ArtifactStore
from ..strategies import format_breakdown, get_strategy, run_strategy

logger = logging.getLogger(__name__)


def run_id_for(run: int) -> str:
    return f"run_{run:02d}"


@dataclass
class ExperimentRun:
    """Inputs for one run of one strategy."""

    strategy: Strategy
    run_id: str
    iterations: int
    template: str
    requests: list[str]
    atypicality: AtypicalityLevel = AtypicalityLevel.NONE
    artifacts: list[str] = field(default_factory=list)


class ExperimentEngine:
    """Sequences strategy steps and owns the evolving artifact lineage.

    Args:
        generator: Generation callable passed to every strategy step
        store: Optional artifact store; when None nothing is persisted
    """

    def __init__(self, generator: GenerateFn, store: ArtifactStore | None = None) -> None:
        self.generator = generator
        self.store = store

    def run(self, run: ExperimentRun) -> RunMetrics:
        strategy = get_strategy(run.strategy)
        suffix = run.atypicality.suffix
        total = min(run.iterations, len(run.requests))

        logger.info(
            f"Starting run {run.run_id} with strategy {strategy.value} "
            f"({total} iterations, atypicality {run.atypicality.value})"
        )

        metrics = RunMetrics(
            run_id=run.run_id, strategy=strategy, atypicality=run.atypicality.value
        )
        current = run.template

        for i in range(1, total + 1):
            request = run.requests[i - 1]
            history = run.requests[:i]
            logger.info(f"[{i}/{total}] Applying request: {request[:50]!r}")

            result = run_strategy(
                strategy,
                previous_artifact=current,
                template=run.template,
                history=history,
                atypicality=run.atypicality,
                generator=self.generator,
            )
            current = result.artifact
            run.artifacts.append(current)

            iteration = IterationMetrics.from_result(i, result, strategy)
            metrics.iterations.append(iteration)
            logger.info(_drift_line(result, strategy))

            if self.store is not None:
                self.store.save_artifact(run.run_id, strategy.value, i, current, suffix)

        if self.store is not None:
            self.store.save_metrics(metrics, suffix)

        logger.info(f"Run {run.run_id} complete. Final drift: {metrics.final_drift}")
        return metrics


def _drift_line(result: StrategyResult, strategy: Strategy) -> str:
    breakdown = format_breakdown(result.final_score)
    breakdown = f" ({breakdown})" if breakdown else ""
    if strategy.retries and len(result.drift_history) > 1:
        trajectory = " → ".join(str(d) for d in result.drift_history)
        return f"Drift: {trajectory} | Retries: {result.retries}{breakdown}"
    return f"Drift: {result.final_score.total} | Retries: {result.retries}{breakdown}"


def run_experiment(
    strategy: "str | Strategy",
    template: str,
    requests: list[str],
    iterations: int,
    generator: GenerateFn,
    run_id: str = "run_01",
    atypicality: "AtypicalityLevel | str" = AtypicalityLevel.NONE,
    store: ArtifactStore | None = None,
) -> RunMetrics:
    """Run one strategy over the change requests.

    The strategy and atypicality level are validated before any generation
    call is made.
    """
    run = ExperimentRun(
        strategy=get_strategy(strategy),
        run_id=run_id,
        iterations=iterations,
        template=template,
        requests=list(requests),
        atypicality=AtypicalityLevel.parse(atypicality),
    )
    return ExperimentEngine(generator=generator, store=store).run(run)
