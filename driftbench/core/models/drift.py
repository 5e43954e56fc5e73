"""Drift score models.

One result model per validator plus the aggregate DriftScore. All models
are frozen: a score is derived from an artifact and never edited after
the fact.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AtypicalityLevel(str, Enum):
    """Optional word-casing constraint layered over the core invariants."""

    NONE = "none"
    WORD_INITIAL = "word-initial"
    THIRD_CHAR = "third-char"

    @classmethod
    def parse(cls, value: "str | AtypicalityLevel | None") -> "AtypicalityLevel":
        """Parse a level name, accepting the low/mid/high aliases.

        Raises:
            ValueError: If the value names no known level.
        """
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        normalized = value.strip().lower()
        if normalized in _LEVEL_ALIASES:
            return _LEVEL_ALIASES[normalized]
        try:
            return cls(normalized)
        except ValueError:
            valid = [level.value for level in cls] + sorted(_LEVEL_ALIASES)
            raise ValueError(
                f"Unknown atypicality level: {value!r}. Valid options: {', '.join(valid)}"
            ) from None

    @property
    def suffix(self) -> str:
        """Run-directory suffix; empty for the unconstrained level."""
        return "" if self is AtypicalityLevel.NONE else f"atyp_{self.value}"


_LEVEL_ALIASES = {
    "low": AtypicalityLevel.NONE,
    "mid": AtypicalityLevel.WORD_INITIAL,
    "high": AtypicalityLevel.THIRD_CHAR,
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# Per-validator results
# =============================================================================


class VocabularyDetail(_Frozen):
    term: str
    count: int
    expected: int = 1


class VocabularyResult(_Frozen):
    violations: int = 0
    details: tuple[VocabularyDetail, ...] = ()


class TemplateDetail(_Frozen):
    section: str = Field(description="Section title as written in the heading")
    number: str = ""
    missing: tuple[str, ...] = ()
    wrong_order: bool = False


class TemplateResult(_Frozen):
    violations: int = 0
    details: tuple[TemplateDetail, ...] = ()


class LongSentence(_Frozen):
    sentence: str = Field(description="Truncated preview of the sentence")
    word_count: int


class StyleResult(_Frozen):
    violations: int = 0
    total_sentences: int = 0
    long_sentences: int = 0
    short_ratio: float = 1.0
    details: tuple[LongSentence, ...] = ()


class BrokenReference(_Frozen):
    reference: str = Field(description="Literal matched text, e.g. 'See Section 9.9'")
    target_section: str


class CrossRefResult(_Frozen):
    violations: int = 0
    details: tuple[BrokenReference, ...] = ()


class AtypicalityResult(_Frozen):
    violations: int = 0
    details: tuple[str, ...] = ()


# =============================================================================
# Aggregate
# =============================================================================


class DriftScore(_Frozen):
    """Unweighted sum of invariant violations plus the per-validator breakdown."""

    total: int
    vocabulary: VocabularyResult
    template: TemplateResult
    style: StyleResult
    cross_refs: CrossRefResult
    atypicality: AtypicalityResult

    @property
    def converged(self) -> bool:
        return self.total == 0

    def breakdown(self) -> dict[str, int]:
        """Violation count per sub-score, in fixed order."""
        return {
            "vocabulary": self.vocabulary.violations,
            "template": self.template.violations,
            "style": self.style.violations,
            "cross_refs": self.cross_refs.violations,
            "atypicality": self.atypicality.violations,
        }
