"""Text normalization for routing."""

import re

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(text: str) -> list[str]:
    """
    Normalize free text into lowercase word tokens.

    Punctuation is removed rather than treated as a separator, so
    "what's" becomes "whats".

    Example:
        >>> tokenize("Deep-dive: Quantum   computing!")
        ['deepdive', 'quantum', 'computing']
    """
    return _NON_WORD.sub("", text.lower()).split()


def token_overlap(a: set[str], b: set[str]) -> float:
    """
    Overlap ratio ``|a & b| / max(|a|, |b|)``.

    Identical non-empty sets score 1.0, disjoint sets 0.0, and two empty
    sets 0.0.
    """
    denominator = max(len(a), len(b))
    if denominator == 0:
        return 0.0
    return len(a & b) / denominator
