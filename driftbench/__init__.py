"""Driftbench: measure structural drift in iteratively evolved documents.

Five evolution strategies (incremental, repair, regeneration,
regen-reconcile, regen-full) rewrite a policy document one change request
at a time. After every step the artifact is scored against four structural
invariants plus an optional casing constraint, and the per-iteration drift
is recorded for comparison.
"""

__version__ = "0.1.0"
