"""File-based artifact and metrics store.

Layout under the runs directory:

    <run_id>_<strategy>[_<suffix>]/v01.md, v02.md, ...
    <run_id>_<strategy>[_<suffix>]_metrics.md
    <run_id>_<strategy>[_<suffix>]_metrics.json
"""

import json
import logging
from pathlib import Path

from ..core.models import RunMetrics

logger = logging.getLogger(__name__)


def run_label(run_id: str, strategy: str, suffix: str = "") -> str:
    return f"{run_id}_{strategy}_{suffix}" if suffix else f"{run_id}_{strategy}"


class ArtifactStore:
    """Persists one artifact snapshot per iteration and one summary per run."""

    def __init__(self, runs_dir: Path | str) -> None:
        self.runs_dir = Path(runs_dir)

    def run_dir(self, run_id: str, strategy: str, suffix: str = "") -> Path:
        return self.runs_dir / run_label(run_id, strategy, suffix)

    def save_artifact(
        self,
        run_id: str,
        strategy: str,
        iteration: int,
        content: str,
        suffix: str = "",
    ) -> Path:
        run_dir = self.run_dir(run_id, strategy, suffix)
        run_dir.mkdir(parents=True, exist_ok=True)

        path = run_dir / f"v{iteration:02d}.md"
        path.write_text(content, encoding="utf-8")
        logger.debug(f"Saved artifact {path}")
        return path

    def save_metrics(self, metrics: RunMetrics, suffix: str = "") -> tuple[Path, Path]:
        """Write the markdown summary and the JSON dump. Returns both paths."""
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        base = run_label(metrics.run_id, metrics.strategy.value, suffix)

        md_path = self.runs_dir / f"{base}_metrics.md"
        md_path.write_text(format_metrics_markdown(metrics), encoding="utf-8")

        json_path = self.runs_dir / f"{base}_metrics.json"
        json_path.write_text(metrics.model_dump_json(indent=2), encoding="utf-8")

        logger.info(f"Saved metrics to {md_path}")
        return md_path, json_path

    @staticmethod
    def load_metrics(path: Path | str) -> RunMetrics:
        with open(path, encoding="utf-8") as f:
            return RunMetrics.model_validate(json.load(f))


def format_metrics_markdown(metrics: RunMetrics) -> str:
    lines = [
        f"# {metrics.strategy.value} | {metrics.run_id}",
        "",
        "| Iter | Drift | Retries | Conv | Vocab | Template | Style | XRef | Atyp |",
        "|------|-------|---------|------|-------|----------|-------|------|------|",
    ]

    for m in metrics.iterations:
        lines.append(
            f"| {m.iteration} | {m.drift_score} | {m.retries} | "
            f"{'✓' if m.converged else '✗'} | {m.vocabulary_violations} | "
            f"{m.template_violations} | {m.style_violations} | "
            f"{m.cross_ref_violations} | {m.atypicality_violations} |"
        )

    lines.extend(
        [
            "",
            "## Summary",
            f"- **Final Drift:** {metrics.final_drift}",
            f"- **Total Retries:** {metrics.total_retries}",
            f"- **Converged:** {metrics.converged_count}/{len(metrics.iterations)}",
        ]
    )
    return "\n".join(lines)
