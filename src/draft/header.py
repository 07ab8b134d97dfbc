"""Section header recognition for code block bodies.

A body may open with a header naming the section it belongs to::

    ⟨parse arguments⟩≡      starts (or restarts) the section
    ⟨parse arguments⟩+≡     continues it

Anything else, including a header with unbalanced delimiters or without the
assignment marker, is plain code belonging to the root section.
"""

from __future__ import annotations

from dataclasses import dataclass

from draft.normalization import normalize_key
from draft.syntax import DEFAULT_SYNTAX, WebSyntax


@dataclass(frozen=True, slots=True)
class SectionHeader:
    """Result of header detection on one block body."""

    raw_name: str
    key: str
    is_first: bool
    body: str           # body with the header line stripped
    body_offset: int    # number of leading characters removed from the block body
    found: bool


def parse_header(body: str, *, syntax: WebSyntax = DEFAULT_SYNTAX) -> SectionHeader:
    """Split an optional leading section header off ``body``.

    Without a header the whole body is returned unchanged with an empty name
    and ``is_first=False``.
    """
    match = syntax.header_re.match(body)
    if match is None:
        return SectionHeader(
            raw_name="",
            key="",
            is_first=False,
            body=body,
            body_offset=0,
            found=False,
        )

    raw_name = match.group(1)
    cut = match.end()
    if body.startswith("\n", cut):
        cut += 1
    return SectionHeader(
        raw_name=raw_name,
        key=normalize_key(raw_name),
        is_first=match.group(2) != syntax.continuation,
        body=body[cut:],
        body_offset=cut,
        found=True,
    )
