"""Section-name canonicalization."""

from __future__ import annotations


def normalize_key(name: str) -> str:
    """Trim and fold every internal whitespace run (newlines included) to one space.

    References and definitions are compared by this key, so a name wrapped
    across lines in the prose still matches its single-line definition.
    """
    return " ".join((name or "").split())
