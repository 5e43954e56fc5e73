"""Sentence length validator (telegraphic style).

Rules:
- No sentence longer than 25 words
- At least 70% of sentences at 12 words or fewer

The ratio rule is a coarse penalty, ceil((0.7 - ratio) * 10), not a
per-sentence count.
"""

import math

from ..core.models import LongSentence, StyleResult
from .grammar import split_sentences

MAX_WORDS = 25
SHORT_THRESHOLD = 12
SHORT_RATIO_TARGET = 0.7
MAX_DETAILS = 10
PREVIEW_CHARS = 50


def validate_style(text: str) -> StyleResult:
    sentences = split_sentences(text)

    details = []
    long_sentences = 0
    short_sentences = 0

    for sentence in sentences:
        word_count = len(sentence.split())

        if word_count > MAX_WORDS:
            long_sentences += 1
            if len(details) < MAX_DETAILS:
                details.append(
                    LongSentence(
                        sentence=sentence[:PREVIEW_CHARS] + "...",
                        word_count=word_count,
                    )
                )

        if word_count <= SHORT_THRESHOLD:
            short_sentences += 1

    short_ratio = short_sentences / len(sentences) if sentences else 1.0

    violations = long_sentences
    if short_ratio < SHORT_RATIO_TARGET:
        violations += math.ceil((SHORT_RATIO_TARGET - short_ratio) * 10)

    return StyleResult(
        violations=violations,
        total_sentences=len(sentences),
        long_sentences=long_sentences,
        short_ratio=short_ratio,
        details=tuple(details),
    )
