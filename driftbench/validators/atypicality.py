"""Atypicality (word casing) validator.

Levels:
- none:         no constraint, always 0 violations
- word-initial: every word starts with a capital letter
- third-char:   the third character of every word of 3+ characters is uppercase

Words are maximal alphanumeric runs. Non-alphabetic characters in the
checked position never count as violations.
"""

from ..core.models import AtypicalityLevel, AtypicalityResult
from .grammar import tokenize_words

MAX_EXAMPLES = 5


def _is_lower_letter(ch: str) -> bool:
    return ch.isalpha() and ch.islower()


def validate_atypicality(
    text: str, level: AtypicalityLevel = AtypicalityLevel.NONE
) -> AtypicalityResult:
    if level is AtypicalityLevel.NONE:
        return AtypicalityResult()

    violations = 0
    details = []

    for word in tokenize_words(text):
        if level is AtypicalityLevel.WORD_INITIAL:
            offending = _is_lower_letter(word[0])
            label = "TitleCase"
        else:
            offending = len(word) >= 3 and _is_lower_letter(word[2])
            label = "3rdLetter"

        if offending:
            violations += 1
            if len(details) < MAX_EXAMPLES:
                details.append(f"{label} violation: {word}")

    return AtypicalityResult(violations=violations, details=tuple(details))
