"""Split a fragment body into literal text and section references."""

from __future__ import annotations

from draft.syntax import DEFAULT_SYNTAX, WebSyntax
from draft.types import Chunklet, SourceSpan


def tokenize_body(body: str, *, syntax: WebSyntax = DEFAULT_SYNTAX) -> list[Chunklet]:
    """Emit the chunklet stream for ``body``.

    References are the shortest ``⟨...⟩`` runs, scanned left to right without
    overlap. The spans tile the body exactly, so joining ``c.raw(body)`` over
    the result gives ``body`` back.
    """
    chunklets: list[Chunklet] = []
    current = 0
    for match in syntax.reference_re.finditer(body):
        start, end = match.span()
        if current < start:
            chunklets.append(Chunklet(kind="text", span=SourceSpan(current, start)))
        chunklets.append(Chunklet(kind="reference", span=SourceSpan(start, end)))
        current = end
    if current < len(body):
        chunklets.append(Chunklet(kind="text", span=SourceSpan(current, len(body))))
    return chunklets


def chunklets_to_dicts(body: str, chunklets: list[Chunklet] | tuple[Chunklet, ...]) -> list[dict[str, object]]:
    """JSON-ready view of a chunklet stream (used by the debug dump)."""
    return [
        {
            "kind": c.kind,
            "char_start": c.span.char_start,
            "char_end": c.span.char_end,
            "text": c.raw(body),
        }
        for c in chunklets
    ]
