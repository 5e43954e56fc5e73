"""Section template validator.

Rule: every top-level numbered section contains these subsections, in order:
Purpose, Scope, Directives, Exceptions, Enforcement.
"""

from ..core.models import TemplateDetail, TemplateResult
from .grammar import split_sections, subsection_marker

REQUIRED_SUBSECTIONS: tuple[str, ...] = (
    "Purpose",
    "Scope",
    "Directives",
    "Exceptions",
    "Enforcement",
)
MAX_DETAILS = 20

_MARKERS = [(name, subsection_marker(name)) for name in REQUIRED_SUBSECTIONS]


def validate_template(text: str) -> TemplateResult:
    details = []
    violations = 0

    for section in split_sections(text):
        body = text[section.start : section.end]
        missing = []
        offsets = []

        for name, marker in _MARKERS:
            match = marker.search(body)
            if match is None:
                missing.append(name)
            else:
                offsets.append(match.start())

        wrong_order = len(offsets) > 1 and any(
            later <= earlier for earlier, later in zip(offsets, offsets[1:])
        )

        if missing or wrong_order:
            violations += len(missing) + (1 if wrong_order else 0)
            if len(details) < MAX_DETAILS:
                details.append(
                    TemplateDetail(
                        section=section.title,
                        number=section.number,
                        missing=tuple(missing),
                        wrong_order=wrong_order,
                    )
                )

    return TemplateResult(violations=violations, details=tuple(details))
