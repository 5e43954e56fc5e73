"""Run-scoped token usage accumulator.

The orchestrator creates one UsageTracker and hands it to the generation
facade; every call records into it. Nothing here is global, so two runs
in one process never share counters.
"""

import time
from typing import Any

from pydantic import BaseModel

from .providers.base import TokenUsage


class CallRecord(BaseModel):
    """A single LLM API call's token usage."""

    model: str
    tier: str = ""
    input_tokens: int
    output_tokens: int
    timestamp: float


class ModelUsage(BaseModel):
    """Accumulated usage for a single model."""

    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0


class UsageTracker:
    """Accumulates call counts and token totals per model."""

    def __init__(self) -> None:
        self._records: list[CallRecord] = []
        self._by_model: dict[str, ModelUsage] = {}
        self._started_at = time.time()

    def record(self, model: str, usage: TokenUsage, tier: str = "") -> None:
        """Record token usage from a single LLM API call."""
        self._records.append(
            CallRecord(
                model=model,
                tier=tier,
                input_tokens=usage.input_tokens,
                output_tokens=usage.output_tokens,
                timestamp=time.time(),
            )
        )
        mu = self._by_model.setdefault(model, ModelUsage())
        mu.calls += 1
        mu.input_tokens += usage.input_tokens
        mu.output_tokens += usage.output_tokens

    @property
    def records(self) -> list[CallRecord]:
        return list(self._records)

    @property
    def total_calls(self) -> int:
        return sum(mu.calls for mu in self._by_model.values())

    @property
    def total_input_tokens(self) -> int:
        return sum(mu.input_tokens for mu in self._by_model.values())

    @property
    def total_output_tokens(self) -> int:
        return sum(mu.output_tokens for mu in self._by_model.values())

    def by_model(self) -> dict[str, ModelUsage]:
        return {model: mu.model_copy() for model, mu in self._by_model.items()}

    def summary(self) -> dict[str, Any]:
        """Totals and per-model breakdown for export/display."""
        return {
            "total_calls": self.total_calls,
            "total_input_tokens": self.total_input_tokens,
            "total_output_tokens": self.total_output_tokens,
            "by_model": {m: mu.model_dump() for m, mu in self._by_model.items()},
            "elapsed_seconds": round(time.time() - self._started_at, 1),
        }

    def summary_line(self) -> str | None:
        """One-line summary, e.g. "openai/gpt-4o-mini · 12 calls · 87k in / 12k out".

        Returns None if no calls were recorded.
        """
        total_calls = self.total_calls
        if total_calls == 0:
            return None

        models = list(self._by_model)
        parts = []
        if len(models) == 1:
            parts.append(models[0])
        else:
            parts.append(f"{len(models)} models")
        parts.append(f"{total_calls} call{'s' if total_calls != 1 else ''}")
        parts.append(
            f"{_format_tokens(self.total_input_tokens)} in / "
            f"{_format_tokens(self.total_output_tokens)} out"
        )
        return " · ".join(parts)


def _format_tokens(n: int) -> str:
    """Format token count for display (e.g., 87k, 1.5M)."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    elif n >= 1_000:
        return f"{n / 1_000:.0f}k"
    return str(n)
