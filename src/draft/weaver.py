"""Recursive section resolution ("tangling").

Weaving a section concatenates its fragments in document order. Literal text
is copied verbatim; each reference is replaced by a marker line naming the
referenced section followed by that section's own woven text. Sections are
re-expanded at every call site; nothing is cached between references or
between calls.

Failure handling:
- missing top-level section  -> ``None`` / ``Err(section_not_found)``
- missing referenced section -> dropped (default) or ``unresolved_reference``
  when ``strict=True``
- reference cycle            -> always ``cycle_detected``
"""

from __future__ import annotations

from collections.abc import Iterator

from draft.types import (
    Chunklet,
    CyclicReferenceError,
    Err,
    Fragment,
    Ok,
    ReferenceSite,
    UnresolvedReferenceError,
    WeaveFailure,
    Weaving,
)
from draft.web import Web

DEFAULT_MARKER = "\n// {reference}\n"


def render_marker(template: str, *, reference: str, name: str) -> str:
    """Fill a marker template; ``{reference}`` is the bracketed name, ``{name}`` the key."""
    return template.format(reference=reference, name=name)


class Weaver:
    """Expands sections of a built ``Web``. Holds no state between calls."""

    def __init__(self, web: Web, *, marker: str = DEFAULT_MARKER, strict: bool = False) -> None:
        render_marker(marker, reference="", name="")
        self.web = web
        self.marker = marker
        self.strict = strict

    def weave(self, key: str) -> str | None:
        """Woven text of ``key``, or None if the web has no such section.

        Raises:
            CyclicReferenceError: the section reaches itself through references.
            UnresolvedReferenceError: strict mode and a reference has no section.
        """
        match self.resolve(key):
            case Ok(value=weaving):
                return weaving.text
            case Err(error=failure):
                if failure.reason == "section_not_found":
                    return None
                if failure.reason == "cycle_detected":
                    raise CyclicReferenceError(failure)
                raise UnresolvedReferenceError(failure)

    def resolve(self, key: str) -> Ok[Weaving] | Err[WeaveFailure]:
        """Non-raising variant of ``weave``; failures come back as ``Err``."""
        if key not in self.web:
            return Err(WeaveFailure(reason="section_not_found", key=key))

        parts: list[str] = []
        unresolved: dict[tuple[str, str, int], ReferenceSite] = {}
        cycle = self._expand(key, parts, unresolved)
        if cycle is not None:
            return Err(WeaveFailure(reason="cycle_detected", key=key, path=cycle))

        missing = tuple(unresolved.values())
        if missing and self.strict:
            return Err(WeaveFailure(reason="unresolved_reference", key=key, unresolved=missing))
        return Ok(Weaving(key=key, text="".join(parts), unresolved=missing))

    def _chunklets(self, key: str) -> Iterator[tuple[Fragment, Chunklet]]:
        for fragment in self.web.fragments(key):
            for chunklet in fragment.chunklets:
                yield fragment, chunklet

    def _expand(
        self,
        key: str,
        parts: list[str],
        unresolved: dict[tuple[str, str, int], ReferenceSite],
    ) -> tuple[str, ...] | None:
        """Append the expansion of ``key`` to ``parts``; return a cycle path on failure.

        Sections being expanded are kept on an explicit stack, so reference
        depth is bounded by memory rather than the interpreter's recursion limit.
        """
        stack = [key]
        frames = [self._chunklets(key)]
        while frames:
            item = next(frames[-1], None)
            if item is None:
                frames.pop()
                stack.pop()
                continue

            fragment, chunklet = item
            body = fragment.body
            if not chunklet.is_reference:
                parts.append(chunklet.raw(body))
                continue

            ref_key = chunklet.key(body, self.web.syntax)
            raw = chunklet.raw(body)
            if ref_key in stack:
                return (*stack, ref_key)
            if ref_key not in self.web:
                site = ReferenceSite(
                    key=ref_key,
                    raw=raw,
                    from_key=stack[-1],
                    source=fragment.source,
                    offset=fragment.offset + chunklet.span.char_start,
                    line=fragment.line_of(chunklet.span.char_start),
                )
                unresolved.setdefault((site.key, site.source, site.offset), site)
                continue

            parts.append(render_marker(self.marker, reference=raw, name=ref_key))
            stack.append(ref_key)
            frames.append(self._chunklets(ref_key))
        return None


def weave(web: Web, key: str = "", *, marker: str = DEFAULT_MARKER, strict: bool = False) -> str | None:
    """Convenience wrapper: ``Weaver(web, ...).weave(key)``."""
    return Weaver(web, marker=marker, strict=strict).weave(key)
