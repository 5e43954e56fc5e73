"""Storage layer for run artifacts and metrics."""

from .store import ArtifactStore, format_metrics_markdown, run_label

__all__ = [
    "ArtifactStore",
    "format_metrics_markdown",
    "run_label",
]
