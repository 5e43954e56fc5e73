"""Tests for the run-scoped usage tracker."""

from driftbench.core.providers.base import TokenUsage
from driftbench.core.usage import UsageTracker


def test_empty_tracker():
    tracker = UsageTracker()
    assert tracker.total_calls == 0
    assert tracker.summary_line() is None
    assert tracker.summary()["by_model"] == {}


def test_accumulates_per_model():
    tracker = UsageTracker()
    tracker.record("openai/gpt-4o-mini", TokenUsage(1000, 200), tier="fast")
    tracker.record("openai/gpt-4o-mini", TokenUsage(1000, 300), tier="fast")
    tracker.record("openai/gpt-5.2", TokenUsage(50, 10), tier="strong")

    assert tracker.total_calls == 3
    assert tracker.total_input_tokens == 2050
    assert tracker.total_output_tokens == 510
    by_model = tracker.by_model()
    assert by_model["openai/gpt-4o-mini"].calls == 2
    assert by_model["openai/gpt-5.2"].output_tokens == 10


def test_by_model_returns_copies():
    tracker = UsageTracker()
    tracker.record("openai/gpt-4o-mini", TokenUsage(10, 5))
    tracker.by_model()["openai/gpt-4o-mini"].calls = 99
    assert tracker.total_calls == 1


def test_summary_line_single_model():
    tracker = UsageTracker()
    tracker.record("openai/gpt-4o-mini", TokenUsage(2000, 500))
    assert tracker.summary_line() == "openai/gpt-4o-mini · 1 call · 2k in / 500 out"


def test_summary_line_many_models():
    tracker = UsageTracker()
    tracker.record("openai/a", TokenUsage(3_000_000, 0))
    tracker.record("anthropic/b", TokenUsage(0, 0))
    assert tracker.summary_line() == "2 models · 2 calls · 3.0M in / 0 out"


def test_trackers_are_independent():
    first, second = UsageTracker(), UsageTracker()
    first.record("openai/a", TokenUsage(1, 1))
    assert second.total_calls == 0
