"""Incremental evolution (baseline).

Applies the change request to the previous artifact in one call. The
result is scored for reporting only; nothing is retried.
"""

from ..core.llm import GenerateFn, generate as default_generate
from ..core.models import AtypicalityLevel, StrategyResult
from ..validators import calculate_drift
from .prompts import INCREMENTAL_SYSTEM_PROMPT, apply_change_prompt, atypicality_constraint


def incremental_evolve(
    previous_artifact: str,
    request: str,
    atypicality: AtypicalityLevel = AtypicalityLevel.NONE,
    generator: GenerateFn | None = None,
) -> StrategyResult:
    generate = generator or default_generate

    artifact = generate(
        system_prompt=INCREMENTAL_SYSTEM_PROMPT,
        user_prompt=apply_change_prompt(
            previous_artifact, request + atypicality_constraint(atypicality)
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
