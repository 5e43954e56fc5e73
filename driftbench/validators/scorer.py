"""Combined drift score.

S(v) = D_vocab + D_template + D_style + D_xref + D_atyp

Every sub-score carries weight 1. The law is kept additive on purpose:
sub-scores live on different scales and are not normalized.
"""

from ..core.models import AtypicalityLevel, DriftScore
from .atypicality import validate_atypicality
from .crossref import validate_cross_refs
from .style import validate_style
from .template import validate_template
from .vocabulary import validate_vocabulary


def calculate_drift(
    text: str, atypicality_level: AtypicalityLevel | str = AtypicalityLevel.NONE
) -> DriftScore:
    """Score an artifact against all invariants. Pure; never raises on text input."""
    level = AtypicalityLevel.parse(atypicality_level)

    vocabulary = validate_vocabulary(text)
    template = validate_template(text)
    style = validate_style(text)
    cross_refs = validate_cross_refs(text)
    atypicality = validate_atypicality(text, level)

    total = (
        vocabulary.violations
        + template.violations
        + style.violations
        + cross_refs.violations
        + atypicality.violations
    )

    return DriftScore(
        total=total,
        vocabulary=vocabulary,
        template=template,
        style=style,
        cross_refs=cross_refs,
        atypicality=atypicality,
    )
