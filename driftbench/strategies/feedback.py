"""Violation report sent back to the writer on every retry.

One line per non-zero category. Length is bounded by the validators'
own detail caps.
"""

from ..core.models import DriftScore

ATYPICALITY_EXAMPLES = 3


def format_violations(score: DriftScore) -> str:
    lines = []

    if score.vocabulary.violations > 0:
        terms = "; ".join(
            f'"{d.term}" appears {d.count} times (must be exactly {d.expected})'
            for d in score.vocabulary.details
        )
        lines.append(f"VOCABULARY ERRORS: {terms}")

    if score.template.violations > 0:
        sections = []
        for d in score.template.details:
            problems = []
            if d.missing:
                problems.append(f"missing: {', '.join(d.missing)}")
            if d.wrong_order:
                problems.append("subsections out of order")
            sections.append(f'Section "{d.section}" {"; ".join(problems)}')
        lines.append(f"STRUCTURE ERRORS: {'; '.join(sections)}")

    if score.style.violations > 0:
        message = f"STYLE ERRORS: {score.style.long_sentences} sentences exceed 25 words limit"
        if score.style.short_ratio < 0.7:
            message += (
                f"; only {score.style.short_ratio:.0%} of sentences are 12 words or fewer"
                " (need 70%)"
            )
        lines.append(message)

    if score.cross_refs.violations > 0:
        refs = ", ".join(d.reference for d in score.cross_refs.details)
        lines.append(f"REFERENCE ERRORS: Broken references: {refs}")

    if score.atypicality.violations > 0:
        examples = ", ".join(score.atypicality.details[:ATYPICALITY_EXAMPLES])
        lines.append(
            f"FORMATTING ERRORS: {score.atypicality.violations} casing violations found. "
            f"Examples: {examples}..."
        )

    return "\n".join(lines)


def format_breakdown(score: DriftScore) -> str:
    """Compact non-zero breakdown for log lines, e.g. "Vocab:2, Style:1"."""
    labels = {
        "vocabulary": "Vocab",
        "template": "Templ",
        "style": "Style",
        "cross_refs": "Ref",
        "atypicality": "Atyp",
    }
    parts = [
        f"{labels[name]}:{count}" for name, count in score.breakdown().items() if count > 0
    ]
    return ", ".join(parts)
