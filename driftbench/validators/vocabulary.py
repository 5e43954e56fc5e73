"""Controlled vocabulary validator.

Rule: each of the 20 vocabulary terms appears exactly once, matched
case-insensitively as a substring.
"""

import re

from ..core.models import VocabularyDetail, VocabularyResult

VOCABULARY: tuple[str, ...] = (
    "Zero Trust",
    "MFA",
    "Bastion Host",
    "RBAC",
    "Data At Rest",
    "Data In Transit",
    "Least Privilege",
    "Air Gap",
    "SLA",
    "Biometric",
    "Cryptographic Salt",
    "PKI",
    "Endpoint Telemetry",
    "SIEM",
    "SOC2",
    "GDPR",
    "OIDC",
    "SAML",
    "Kill Chain",
    "Honeypot",
)

_TERM_PATTERNS = {term: re.compile(re.escape(term), re.IGNORECASE) for term in VOCABULARY}


def count_term(text: str, term: str) -> int:
    """Non-overlapping, case-insensitive occurrences of a term."""
    pattern = _TERM_PATTERNS.get(term) or re.compile(re.escape(term), re.IGNORECASE)
    return len(pattern.findall(text))


def validate_vocabulary(text: str) -> VocabularyResult:
    details = []
    violations = 0

    for term in VOCABULARY:
        count = count_term(text, term)
        if count != 1:
            violations += abs(count - 1)
            details.append(VocabularyDetail(term=term, count=count))

    return VocabularyResult(violations=violations, details=tuple(details))
