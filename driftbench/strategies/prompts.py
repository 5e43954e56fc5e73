"""Prompt text for the document writer and the requirements reconciler."""

from ..core.models import AtypicalityLevel
from ..validators import REQUIRED_SUBSECTIONS, VOCABULARY

_TERMS = ", ".join(VOCABULARY)
_SUBSECTIONS = ", ".join(REQUIRED_SUBSECTIONS)
_SUBSECTION_LINES = "\n".join(f"   ### {name}" for name in REQUIRED_SUBSECTIONS)

INCREMENTAL_SYSTEM_PROMPT = """You are a technical writer maintaining a Cybersecurity Policy document.
Apply the requested change while preserving the existing strict structure and style.
Return ONLY the complete updated document, no explanations."""

REPAIR_SYSTEM_PROMPT = f"""You are a technical writer maintaining a Cybersecurity Policy document.
Apply the requested change while strictly following these rules:
1. Each term from the controlled vocabulary must appear exactly once
2. Every section must have subsections: {_SUBSECTIONS}
3. Max sentence length: 25 words. At least 70% sentences ≤12 words
4. All "See Section X" references must point to existing sections

Return ONLY the complete updated document, no explanations."""

REGENERATION_SYSTEM_PROMPT = f"""You are a technical writer creating a Cybersecurity Policy document.

CRITICAL STRUCTURAL RULES (these OVERRIDE any conflicting requirements):

1. VOCABULARY: Each term must appear EXACTLY ONCE (no more, no less):
   {_TERMS}

2. STRUCTURE: Every numbered section MUST have these subsections IN ORDER:
{_SUBSECTION_LINES}

3. STYLE: Maximum 25 words per sentence. At least 70% sentences must be ≤12 words.

4. REFERENCES: All "See Section X" must point to existing sections.

If any requirement conflicts with these rules, IGNORE the requirement and follow the rules."""

RECONCILE_SYSTEM_PROMPT = """You are a requirements analyst. Your job is to reconcile conflicting requirements.

Given a list of requirements, identify and resolve conflicts by:
1. Removing requirements that contradict structural rules (vocabulary, section structure, style)
2. Merging similar requirements
3. Prioritizing requirements that respect the original document structure

Output a CLEAN, NON-CONFLICTING list of requirements."""

_ATYPICALITY_CONSTRAINTS = {
    AtypicalityLevel.NONE: "",
    AtypicalityLevel.WORD_INITIAL: (
        "\n\nCONSTRAINT: You must write in Title Case. ALL words (including small ones "
        'like "is", "the", "a") must start with a Capital Letter.'
    ),
    AtypicalityLevel.THIRD_CHAR: (
        "\n\nCONSTRAINT: You must write in 3rd-Letter-Uppercase Case. The third letter "
        'of every word (if it exists) must be capitalized (e.g., "heLlo woRld", "teSt", '
        '"is", "a", "coMplex"). ALL OTHER letters must be lowercase (except the first '
        "letter if it starts a sentence). DO NOT use Title Case or random caps."
    ),
}


def atypicality_constraint(level: AtypicalityLevel) -> str:
    """Prompt suffix describing the casing constraint; empty for none."""
    return _ATYPICALITY_CONSTRAINTS[level]


def number_requests(requests: list[str]) -> str:
    return "\n".join(f"{i}. {request}" for i, request in enumerate(requests, 1))


def apply_change_prompt(artifact: str, request: str) -> str:
    return f"""Here is the current policy document:

{artifact}

---

Apply the following change:
{request}

Return the complete updated document."""


def repair_prompt(artifact: str, violations: str) -> str:
    return f"""Here is a document with violations that must be fixed:

{artifact}

---

⚠️ VIOLATIONS TO FIX:
{violations}

Fix ALL violations while keeping the document content intact.
Return the complete fixed document."""


def regenerate_prompt(template: str, requests: list[str]) -> str:
    return f"""Generate a Cybersecurity Policy document.

BASE STRUCTURE (use as template):
{template}

INCORPORATE THESE REQUIREMENTS (structural rules take priority):
{number_requests(requests)}

Generate the complete document. Structural rules OVERRIDE conflicting requirements."""


def reconcile_prompt(requests: list[str]) -> str:
    return f"""STRUCTURAL RULES (must be preserved):
1. Each of these 20 terms must appear exactly once: {_TERMS}
2. Every section must have: {_SUBSECTIONS}
3. Max 25 words per sentence

REQUIREMENTS TO RECONCILE:
{number_requests(requests)}

Output only the reconciled requirements list, numbered. Remove any that conflict with structural rules."""


def reconciled_generate_prompt(
    template: str, reconciled: str, violations: str | None = None
) -> str:
    prompt = f"""Generate a Cybersecurity Policy document.

BASE STRUCTURE (use as template):
{template}

RECONCILED REQUIREMENTS:
{reconciled}
"""
    if violations:
        return (
            prompt
            + f"""
⚠️ YOUR PREVIOUS ATTEMPT HAD THESE ERRORS - FIX THEM:
{violations}

Generate the complete document with ALL errors fixed."""
        )
    return prompt + "\nGenerate the complete document following ALL structural rules."
