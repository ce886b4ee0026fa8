"""Canonical text forms used when comparing and committing transcripts."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
# ".", full-width "。", "!" and "?" at the end of an utterance
_TRAILING_TERMINATORS_RE = re.compile(r"[.。!?]+$")


def clean_transcript(text: str | None) -> str:
    """Trim leading and trailing whitespace."""
    return (text or "").strip()


def normalize_transcript(text: str | None) -> str:
    """Reduce raw recognition text to its comparable canonical form.

    Trims, collapses internal whitespace runs to one space and strips
    trailing sentence terminators, which engines add inconsistently to the
    same utterance.

    Example:
        >>> normalize_transcript("  xin   chào.。 ")
        'xin chào'

    """
    collapsed = _WHITESPACE_RE.sub(" ", clean_transcript(text))
    return _TRAILING_TERMINATORS_RE.sub("", collapsed).rstrip()


__all__ = ["clean_transcript", "normalize_transcript"]
