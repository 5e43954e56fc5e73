"""Experiment orchestration: input loading and the iteration runner."""

from .engine import ExperimentEngine, ExperimentRun, run_experiment, run_id_for
from .loader import load_requests, load_template

__all__ = [
    "ExperimentEngine",
    "ExperimentRun",
    "run_experiment",
    "run_id_for",
    "load_requests",
    "load_template",
]
