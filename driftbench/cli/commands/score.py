"""Score command: measure drift of an existing artifact."""

from pathlib import Path

import typer

from ..app import app, console, get_json_mode
from ..utils import ExitCode, Output
from ...core.models import AtypicalityLevel, DriftScore
from ...validators import calculate_drift


def _detail_lines(score: DriftScore) -> dict[str, str]:
    """Short human-readable detail per sub-score."""
    template_parts = []
    for d in score.template.details:
        problems = list(d.missing) + (["wrong order"] if d.wrong_order else [])
        template_parts.append(f"{d.number}. {d.section}: {', '.join(problems)}")

    return {
        "vocabulary": "; ".join(
            f"{d.term} x{d.count}" for d in score.vocabulary.details
        ),
        "template": "; ".join(template_parts),
        "style": (
            f"{score.style.long_sentences} long / {score.style.total_sentences} sentences, "
            f"short ratio {score.style.short_ratio:.0%}"
        ),
        "cross_refs": ", ".join(d.reference for d in score.cross_refs.details),
        "atypicality": ", ".join(score.atypicality.details),
    }


@app.command("score")
def score_command(
    artifact: Path = typer.Argument(..., help="Artifact to score (markdown)"),
    atypicality: str = typer.Option(
        "none",
        "--atypicality",
        "-a",
        help="Atypicality level: none, word-initial, third-char (or low, mid, high)",
    ),
):
    """Score an artifact against the structural invariants.

    Example:
        driftbench score data/runs/run_01_repair/v15.md -a mid
    """
    out = Output(console=console, json_mode=get_json_mode())

    try:
        level = AtypicalityLevel.parse(atypicality)
    except ValueError as e:
        out.error(str(e))
        raise typer.Exit(out.finish())

    if not artifact.exists():
        out.error(f"Artifact not found: {artifact}", exit_code=ExitCode.FILE_NOT_FOUND)
        raise typer.Exit(out.finish())

    score = calculate_drift(artifact.read_text(encoding="utf-8"), level)

    if get_json_mode():
        out.set_data("score", score.model_dump(mode="json"))
        raise typer.Exit(out.finish())

    details = _detail_lines(score)
    rows = [
        [name, str(count), details[name] if count else ""]
        for name, count in score.breakdown().items()
    ]
    out.table(f"Drift: {artifact.name}", ["Validator", "Violations", "Details"], rows)

    if score.converged:
        out.success("Artifact conforms to every invariant")
    else:
        out.text(f"Total drift: [bold]{score.total}[/bold]")

    raise typer.Exit(out.finish())
