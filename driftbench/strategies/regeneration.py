"""Regeneration from the base template.

Every step rebuilds the whole document from the base template and the
full request history instead of editing the previous artifact.

- regeneration: single shot over the raw history
- regen-reconcile: reconcile the history first (strong tier), then single shot
- regen-full: reconcile, then regenerate with feedback until the document
  conforms or MAX_RETRIES is spent. Non-improving attempts do not stop the
  loop, and the best-scoring attempt wins, not the last one.
"""

import logging

from ..core.llm import GenerateFn, ModelTier, generate as default_generate
from ..core.models import AtypicalityLevel, DriftScore, StrategyResult
from ..validators import calculate_drift
from .feedback import format_violations
from .prompts import (
    RECONCILE_SYSTEM_PROMPT,
    REGENERATION_SYSTEM_PROMPT,
    atypicality_constraint,
    reconcile_prompt,
    reconciled_generate_prompt,
    regenerate_prompt,
)

MAX_RETRIES = 3

logger = logging.getLogger(__name__)


def reconcile_requirements(requests: list[str], generator: GenerateFn | None = None) -> str:
    """Collapse the request history into a non-conflicting numbered list."""
    generate = generator or default_generate
    return generate(
        system_prompt=RECONCILE_SYSTEM_PROMPT,
        user_prompt=reconcile_prompt(requests),
        tier=ModelTier.STRONG,
    )


def regeneration_evolve(
    template: str,
    requests: list[str],
    atypicality: AtypicalityLevel = AtypicalityLevel.NONE,
    generator: GenerateFn | None = None,
) -> StrategyResult:
    """Single-shot regeneration over the raw request history."""
    generate = generator or default_generate

    artifact = generate(
        system_prompt=REGENERATION_SYSTEM_PROMPT,
        user_prompt=regenerate_prompt(
            template + atypicality_constraint(atypicality), requests
        ),
    )
    score = calculate_drift(artifact, atypicality)

    return StrategyResult(
        artifact=artifact,
        retries=0,
        final_score=score,
        converged=score.total == 0,
        drift_history=(score.total,),
    )


class _BestCandidate:
    """Lowest-scoring artifact seen so far; earlier wins ties."""

    def __init__(self, artifact: str, score: DriftScore) -> None:
        self.artifact = artifact
        self.score = score

    def offer(self, artifact: str, score: DriftScore) -> None:
        if score.total < self.score.total:
            self.artifact = artifact
            self.score = score


def reconciled_regeneration_evolve(
    template: str,
    requests: list[str],
    atypicality: AtypicalityLevel = AtypicalityLevel.NONE,
    generator: GenerateFn | None = None,
    use_retries: bool = True,
    max_retries: int = MAX_RETRIES,
) -> StrategyResult:
    """Reconcile the history, then regenerate (regen-reconcile / regen-full)."""
    generate = generator or default_generate
    base = template + atypicality_constraint(atypicality)

    reconciled = reconcile_requirements(requests, generate)

    artifact = generate(
        system_prompt=REGENERATION_SYSTEM_PROMPT,
        user_prompt=reconciled_generate_prompt(base, reconciled),
    )
    score = calculate_drift(artifact, atypicality)
    drift_history = [score.total]
    retries = 0

    if not use_retries:
        return StrategyResult(
            artifact=artifact,
            retries=0,
            final_score=score,
            converged=score.total == 0,
            drift_history=tuple(drift_history),
        )

    best = _BestCandidate(artifact, score)

    while score.total > 0 and retries < max_retries:
        retries += 1

        artifact = generate(
            system_prompt=REGENERATION_SYSTEM_PROMPT,
            user_prompt=reconciled_generate_prompt(
                base, reconciled, violations=format_violations(score)
            ),
        )
        score = calculate_drift(artifact, atypicality)
        drift_history.append(score.total)
        best.offer(artifact, score)
        logger.debug(f"[regen-full] attempt {retries}/{max_retries}: drift {score.total}")

    final_score = calculate_drift(best.artifact, atypicality)
    return StrategyResult(
        artifact=best.artifact,
        retries=retries,
        final_score=final_score,
        converged=final_score.total == 0,
        drift_history=tuple(drift_history),
    )
