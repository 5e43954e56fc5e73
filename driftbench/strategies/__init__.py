"""Document evolution strategies.

Every strategy takes the lineage it needs (previous artifact + newest
request, or base template + full history), runs its bounded control loop
against the drift scorer and returns a StrategyResult.
"""

from functools import partial
from typing import Callable

from ..core.llm import GenerateFn
from ..core.models import ALL_STRATEGIES, AtypicalityLevel, Strategy, StrategyResult
from .feedback import format_breakdown, format_violations
from .incremental import incremental_evolve
from .regeneration import (
    reconcile_requirements,
    reconciled_regeneration_evolve,
    regeneration_evolve,
)
from .repair import repair_evolve

# Steps on (previous_artifact, request) vs (template, request_history)
_INCREMENTAL_STEPS: dict[Strategy, Callable[..., StrategyResult]] = {
    Strategy.INCREMENTAL: incremental_evolve,
    Strategy.REPAIR: repair_evolve,
}
_REGENERATION_STEPS: dict[Strategy, Callable[..., StrategyResult]] = {
    Strategy.REGENERATION: regeneration_evolve,
    Strategy.REGEN_RECONCILE: partial(reconciled_regeneration_evolve, use_retries=False),
    Strategy.REGEN_FULL: partial(reconciled_regeneration_evolve, use_retries=True),
}


def get_strategy(name: "str | Strategy") -> Strategy:
    """Resolve a strategy identifier.

    Raises:
        ValueError: If the identifier names no strategy.
    """
    if isinstance(name, Strategy):
        return name
    try:
        return Strategy(name)
    except ValueError:
        raise ValueError(
            f"Unknown strategy: {name}. "
            f"Valid options: {', '.join(s.value for s in ALL_STRATEGIES)}"
        ) from None


def run_strategy(
    strategy: "str | Strategy",
    *,
    previous_artifact: str,
    template: str,
    history: list[str],
    atypicality: AtypicalityLevel = AtypicalityLevel.NONE,
    generator: GenerateFn | None = None,
) -> StrategyResult:
    """Run one step of a strategy given the full lineage.

    Args:
        strategy: Strategy identifier
        previous_artifact: Artifact produced by the previous step
        template: Base template document
        history: All change requests so far; the last one is the newest
        atypicality: Casing constraint level
        generator: Generation callable (defaults to core.llm.generate)
    """
    strategy = get_strategy(strategy)
    if not history:
        raise ValueError("Strategy step requires at least one change request")

    if strategy in _INCREMENTAL_STEPS:
        return _INCREMENTAL_STEPS[strategy](
            previous_artifact, history[-1], atypicality=atypicality, generator=generator
        )
    return _REGENERATION_STEPS[strategy](
        template, list(history), atypicality=atypicality, generator=generator
    )


__all__ = [
    "Strategy",
    "ALL_STRATEGIES",
    "get_strategy",
    "run_strategy",
    "incremental_evolve",
    "repair_evolve",
    "regeneration_evolve",
    "reconciled_regeneration_evolve",
    "reconcile_requirements",
    "format_violations",
    "format_breakdown",
]
