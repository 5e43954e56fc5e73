"""Document grammar shared by the validators.

The policy document is markdown-like. Only three constructs carry
structure:

    heading line       ``#`` or ``##``, a number (``3`` or ``3.1``), a period, a title
    subsection marker  ``###`` followed by a subsection name
    reference phrase   ``see section <number>``, any casing

Everything else is prose. Sentences are split on terminal punctuation and
words for the casing constraint are maximal alphanumeric runs.
"""

import re
from dataclasses import dataclass

HEADING_PATTERN = re.compile(
    r"^#{1,2}\s+([0-9]+(?:\.[0-9]+)?)\.\s+(.+)$", re.MULTILINE
)
REFERENCE_PATTERN = re.compile(
    r"see\s+section\s+([0-9]+(?:\.[0-9]+)?)", re.IGNORECASE
)
SENTENCE_BREAK = re.compile(r"[.!?]+")
WORD_PATTERN = re.compile(r"[^\W_]+")

HEADING_MARKER = "#"


@dataclass(frozen=True)
class Heading:
    number: str
    title: str
    start: int

    @property
    def is_top_level(self) -> bool:
        return "." not in self.number


@dataclass(frozen=True)
class Section:
    number: str
    title: str
    start: int
    end: int


def subsection_marker(name: str) -> re.Pattern:
    """Pattern for a ``### <name>`` marker, matched case-insensitively."""
    return re.compile(rf"###\s+{re.escape(name)}", re.IGNORECASE)


def find_headings(text: str) -> list[Heading]:
    """All numbered headings, dotted or not, in document order."""
    return [
        Heading(number=m.group(1), title=m.group(2), start=m.start())
        for m in HEADING_PATTERN.finditer(text)
    ]


def split_sections(text: str) -> list[Section]:
    """Split the document into top-level numbered sections.

    A section spans from its heading to the next top-level heading, or to
    the end of the document.
    """
    headings = [h for h in find_headings(text) if h.is_top_level]
    sections = []
    for i, heading in enumerate(headings):
        end = headings[i + 1].start if i + 1 < len(headings) else len(text)
        sections.append(
            Section(
                number=heading.number,
                title=heading.title,
                start=heading.start,
                end=end,
            )
        )
    return sections


def section_numbers(text: str) -> set[str]:
    """Every section number defined by a heading, including dotted ones."""
    return {h.number for h in find_headings(text)}


def split_sentences(text: str) -> list[str]:
    """Sentence candidates, trimmed, without empties or heading chunks."""
    sentences = []
    for chunk in SENTENCE_BREAK.split(text):
        chunk = chunk.strip()
        if chunk and not chunk.startswith(HEADING_MARKER):
            sentences.append(chunk)
    return sentences


def tokenize_words(text: str) -> list[str]:
    return WORD_PATTERN.findall(text)
