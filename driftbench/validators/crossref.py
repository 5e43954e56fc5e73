"""Cross-reference validator.

Rule: every "See Section X" points to a section defined in the document.
"""

from ..core.models import BrokenReference, CrossRefResult
from .grammar import REFERENCE_PATTERN, section_numbers

MAX_DETAILS = 20


def validate_cross_refs(text: str) -> CrossRefResult:
    existing = section_numbers(text)
    details = []
    violations = 0

    for match in REFERENCE_PATTERN.finditer(text):
        target = match.group(1)
        if target in existing:
            continue
        violations += 1
        if len(details) < MAX_DETAILS:
            details.append(BrokenReference(reference=match.group(0), target_section=target))

    return CrossRefResult(violations=violations, details=tuple(details))
