"""Keyword extraction for goal and verse text."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"\W+")

MIN_KEYWORD_LENGTH = 3


def extract_keywords(text: str | None) -> list[str]:
    """Split text into lowercase word tokens, keeping those longer than two characters.

    Non-word characters are stripped from each whitespace-separated token, so
    ``"Gym!"`` becomes ``"gym"`` and ``"self-control"`` becomes ``"selfcontrol"``.

    >>> extract_keywords("Go Gym Now")
    ['gym', 'now']
    """
    if not text:
        return []
    keywords = []
    for token in text.lower().split():
        word = _NON_WORD_RE.sub("", token)
        if len(word) >= MIN_KEYWORD_LENGTH:
            keywords.append(word)
    return keywords
