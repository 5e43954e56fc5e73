"""CLI commands for Driftbench."""

from . import run, score, config_cmd

__all__ = [
    "run",
    "score",
    "config_cmd",
]
