"""Pydantic models for Driftbench, organized by domain.

- drift.py: validator results and the aggregate DriftScore
- run.py: strategy identifiers, strategy results and run metrics
"""

from .drift import (
    AtypicalityLevel,
    VocabularyDetail,
    VocabularyResult,
    TemplateDetail,
    TemplateResult,
    LongSentence,
    StyleResult,
    BrokenReference,
    CrossRefResult,
    AtypicalityResult,
    DriftScore,
)
from .run import (
    Strategy,
    ALL_STRATEGIES,
    StrategyResult,
    IterationMetrics,
    RunMetrics,
)

__all__ = [
    # Drift
    "AtypicalityLevel",
    "VocabularyDetail",
    "VocabularyResult",
    "TemplateDetail",
    "TemplateResult",
    "LongSentence",
    "StyleResult",
    "BrokenReference",
    "CrossRefResult",
    "AtypicalityResult",
    "DriftScore",
    # Runs
    "Strategy",
    "ALL_STRATEGIES",
    "StrategyResult",
    "IterationMetrics",
    "RunMetrics",
]
