"""Incremental evolution with a repair loop.

Applies the change request, then feeds the violation report back for up
to MAX_RETRIES repair attempts. The loop stops as soon as the document
conforms, or after the first attempt that fails to strictly improve on
the one before it. That non-improving attempt is kept as the result.
"""

import logging

from ..core.llm import GenerateFn, generate as default_generate
from ..core.models import AtypicalityLevel, StrategyResult
from ..validators import calculate_drift
from .feedback import format_violations
from .prompts import (
    REPAIR_SYSTEM_PROMPT,
    apply_change_prompt,
    atypicality_constraint,
    repair_prompt,
)

MAX_RETRIES = 3

logger = logging.getLogger(__name__)


def repair_evolve(
    previous_artifact: str,
    request: str,
    atypicality: AtypicalityLevel = AtypicalityLevel.NONE,
    generator: GenerateFn | None = None,
    max_retries: int = MAX_RETRIES,
) -> StrategyResult:
    generate = generator or default_generate

    artifact = generate(
        system_prompt=REPAIR_SYSTEM_PROMPT,
        user_prompt=apply_change_prompt(
            previous_artifact, request + atypicality_constraint(atypicality)
        ),
    )
    score = calculate_drift(artifact, atypicality)
    drift_history = [score.total]
    retries = 0

    while score.total > 0 and retries < max_retries:
        retries += 1
        previous_total = score.total

        artifact = generate(
            system_prompt=REPAIR_SYSTEM_PROMPT,
            user_prompt=repair_prompt(artifact, format_violations(score)),
        )
        score = calculate_drift(artifact, atypicality)
        drift_history.append(score.total)
        logger.debug(f"[repair] attempt {retries}/{max_retries}: drift {score.total}")

        if score.total >= previous_total:
            break

    return StrategyResult(
        artifact=artifact,
        retries=retries,
        final_score=score,
        converged=score.total == 0,
        drift_history=tuple(drift_history),
    )
