"""Strategy and run result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .drift import DriftScore


class Strategy(str, Enum):
    """Document evolution strategy identifiers."""

    INCREMENTAL = "incremental"  # baseline: no retries, no reconciliation
    REPAIR = "repair"  # incremental + repair loop
    REGENERATION = "regeneration"  # regenerate from template, single shot
    REGEN_RECONCILE = "regen-reconcile"  # regeneration + reconciliation
    REGEN_FULL = "regen-full"  # reconciliation + regeneration retries

    @property
    def retries(self) -> bool:
        """Whether this strategy runs a scoring-gated retry loop."""
        return self in (Strategy.REPAIR, Strategy.REGEN_FULL)

    @property
    def reconciles(self) -> bool:
        """Whether this strategy reconciles requests on the strong tier."""
        return self in (Strategy.REGEN_RECONCILE, Strategy.REGEN_FULL)


ALL_STRATEGIES: tuple[Strategy, ...] = tuple(Strategy)


class StrategyResult(BaseModel):
    """Outcome of one strategy step."""

    model_config = ConfigDict(frozen=True)

    artifact: str
    retries: int = 0
    final_score: DriftScore
    converged: bool
    drift_history: tuple[int, ...] = Field(
        default=(), description="Total drift observed at each attempt, in order"
    )


class IterationMetrics(BaseModel):
    """Persisted record for one iteration of a run."""

    model_config = ConfigDict(frozen=True)

    iteration: int
    drift_score: int
    retries: int
    converged: bool
    vocabulary_violations: int
    template_violations: int
    style_violations: int
    cross_ref_violations: int
    atypicality_violations: int = 0
    drift_history: list[int] | None = None

    @classmethod
    def from_result(
        cls, iteration: int, result: StrategyResult, strategy: Strategy
    ) -> "IterationMetrics":
        score = result.final_score
        return cls(
            iteration=iteration,
            drift_score=score.total,
            retries=result.retries,
            converged=result.converged,
            vocabulary_violations=score.vocabulary.violations,
            template_violations=score.template.violations,
            style_violations=score.style.violations,
            cross_ref_violations=score.cross_refs.violations,
            atypicality_violations=score.atypicality.violations,
            drift_history=list(result.drift_history) if strategy.retries else None,
        )


class RunMetrics(BaseModel):
    """All iteration records of one run."""

    run_id: str
    strategy: Strategy
    atypicality: str = "none"
    iterations: list[IterationMetrics] = Field(default_factory=list)

    @property
    def final_drift(self) -> int:
        return self.iterations[-1].drift_score if self.iterations else 0

    @property
    def total_retries(self) -> int:
        return sum(m.retries for m in self.iterations)

    @property
    def converged_count(self) -> int:
        return sum(1 for m in self.iterations if m.converged)
