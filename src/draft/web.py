"""The web: every section name mapped to its fragments in document order.

Built in one forward pass over the scanned code blocks. Blocks whose language
tag is not the configured one never become fragments. Once built, the web is
only read (by the weaver and by the inspection helpers below).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from draft.header import parse_header
from draft.lexer import tokenize_body
from draft.scanner import scan_code_blocks
from draft.syntax import DEFAULT_SYNTAX, WebSyntax
from draft.types import CodeBlock, Fragment, ReferenceSite, WebDiagnostic

log = logging.getLogger(__name__)


def make_fragment(block: CodeBlock, *, syntax: WebSyntax = DEFAULT_SYNTAX) -> Fragment:
    """Run header detection and tokenization on one code block."""
    header = parse_header(block.body, syntax=syntax)
    stripped = block.body[:header.body_offset]
    return Fragment(
        key=header.key,
        raw_name=header.raw_name,
        body=header.body,
        chunklets=tuple(tokenize_body(header.body, syntax=syntax)),
        starts_section=header.is_first,
        has_header=header.found,
        language=block.language,
        offset=block.offset + header.body_offset,
        line=block.body_line + stripped.count("\n"),
        source=block.source,
    )


class Web:
    """Normalized section name -> fragments, in order of appearance."""

    def __init__(self, *, language: str, syntax: WebSyntax = DEFAULT_SYNTAX) -> None:
        self.language = language
        self.syntax = syntax
        self._sections: dict[str, list[Fragment]] = {}
        self._order: list[Fragment] = []

    @classmethod
    def from_blocks(
        cls,
        blocks: Iterable[CodeBlock],
        *,
        language: str,
        syntax: WebSyntax = DEFAULT_SYNTAX,
    ) -> Web:
        web = cls(language=language, syntax=syntax)
        for block in blocks:
            web.add_block(block)
        return web

    def add_block(self, block: CodeBlock) -> Fragment | None:
        """Register ``block`` if its tag matches; return the new fragment."""
        if block.language != self.language:
            log.debug(
                "%s:%d: skipping %r block (want %r)",
                block.source, block.line, block.language, self.language,
            )
            return None
        fragment = make_fragment(block, syntax=self.syntax)
        self._sections.setdefault(fragment.key, []).append(fragment)
        self._order.append(fragment)
        log.debug(
            "%s:%d: fragment for %r (%s)",
            fragment.source, fragment.line, fragment.key,
            "start" if fragment.starts_section else "continuation",
        )
        return fragment

    def add_document(self, text: str, *, source: str = "<string>") -> int:
        """Scan a Markdown document into this web; return fragments added."""
        added = 0
        for block in scan_code_blocks(text, source=source):
            if self.add_block(block) is not None:
                added += 1
        return added

    # ── Lookup ────────────────────────────────────────────────────

    def __contains__(self, key: object) -> bool:
        return key in self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def keys(self) -> list[str]:
        return list(self._sections)

    def fragments(self, key: str) -> tuple[Fragment, ...]:
        return tuple(self._sections.get(key, ()))

    def all_fragments(self) -> list[Fragment]:
        """Every fragment, in the order it was added."""
        return list(self._order)

    # ── Inspection ────────────────────────────────────────────────

    def references(self) -> list[ReferenceSite]:
        """Every embedded section reference."""
        sites: list[ReferenceSite] = []
        for fragment in self.all_fragments():
            for chunklet in fragment.references():
                sites.append(ReferenceSite(
                    key=chunklet.key(fragment.body, self.syntax),
                    raw=chunklet.raw(fragment.body),
                    from_key=fragment.key,
                    source=fragment.source,
                    offset=fragment.offset + chunklet.span.char_start,
                    line=fragment.line_of(chunklet.span.char_start),
                ))
        return sites

    def unresolved_references(self) -> dict[str, list[ReferenceSite]]:
        """Referenced names with no fragments, with every referencing site."""
        missing: dict[str, list[ReferenceSite]] = {}
        for site in self.references():
            if site.key not in self._sections:
                missing.setdefault(site.key, []).append(site)
        return missing

    def roots(self) -> list[str]:
        """Sections that no fragment references, in order of first appearance."""
        referenced = {site.key for site in self.references()}
        return [key for key in self._sections if key not in referenced]

    def lint(self) -> list[WebDiagnostic]:
        """Check start/continuation flags against fragment order.

        The flags never affect weaving; fragments are always concatenated in
        document order. Headerless root blocks are not checked.
        """
        diagnostics: list[WebDiagnostic] = []
        for key, fragments in self._sections.items():
            named = [f for f in fragments if f.has_header]
            if not named:
                continue
            first = named[0]
            if not first.starts_section:
                diagnostics.append(WebDiagnostic(
                    kind="continuation_without_start",
                    key=key,
                    source=first.source,
                    line=first.line,
                    message=f"section {key!r} is continued before it is started",
                ))
            started = first.starts_section
            for fragment in named[1:]:
                if fragment.starts_section and started:
                    diagnostics.append(WebDiagnostic(
                        kind="duplicate_start",
                        key=key,
                        source=fragment.source,
                        line=fragment.line,
                        message=f"section {key!r} is started again; fragments are appended",
                    ))
                started = started or fragment.starts_section
        return diagnostics


def build_web(
    text: str,
    *,
    language: str,
    syntax: WebSyntax = DEFAULT_SYNTAX,
    source: str = "<string>",
) -> Web:
    """Scan one Markdown document and build its web."""
    web = Web(language=language, syntax=syntax)
    web.add_document(text, source=source)
    return web
