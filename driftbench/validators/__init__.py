"""Structural validators and the drift scorer."""

from .vocabulary import VOCABULARY, validate_vocabulary
from .template import REQUIRED_SUBSECTIONS, validate_template
from .style import validate_style
from .crossref import validate_cross_refs
from .atypicality import validate_atypicality
from .scorer import calculate_drift

__all__ = [
    "VOCABULARY",
    "REQUIRED_SUBSECTIONS",
    "validate_vocabulary",
    "validate_template",
    "validate_style",
    "validate_cross_refs",
    "validate_atypicality",
    "calculate_drift",
]
