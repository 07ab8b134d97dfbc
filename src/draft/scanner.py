"""Code block discovery for Markdown documents.

Thin wrapper over markdown-it-py: walks the block token stream and yields one
``CodeBlock`` per fenced or indented code block, with char offsets into the
(LF-normalized) document. Everything else in the document is prose and is
skipped.

Offsets and lines always refer to ``normalize_newlines(text)``; markdown-it
performs the same CRLF/CR folding before tokenizing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from markdown_it import MarkdownIt

from draft.types import CodeBlock, DocumentStructureError

log = logging.getLogger(__name__)

_MD = MarkdownIt("commonmark")


def normalize_newlines(text: str) -> str:
    """Collapse CRLF and CR to LF."""
    return (text or "").replace("\r\n", "\n").replace("\r", "\n")


def compute_line_starts(text: str) -> list[int]:
    """Char offsets of every line start (position 0 plus one past each ``\\n``)."""
    starts = [0]
    for i, ch in enumerate(text):
        if ch == "\n":
            starts.append(i + 1)
    return starts


def _line_offset(line_index: int, line_starts: list[int], text_len: int) -> int:
    if line_index < len(line_starts):
        return line_starts[line_index]
    return text_len


def _content_lines(content: str) -> int:
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


def _has_closing_fence(first_line: int, end_line: int, content: str) -> bool:
    """True when markdown-it ended the fence on a closing line.

    An unclosed fence swallows every line up to the end of its container, so
    its content covers all lines after the opener; a closed one stops a line short.
    """
    return _content_lines(content) == end_line - first_line - 2


def language_of(info: str) -> str:
    """Language tag of an info string: its first word."""
    words = (info or "").split()
    return words[0] if words else ""


def scan_code_blocks(text: str, *, source: str = "<string>") -> Iterator[CodeBlock]:
    """Yield the code blocks of a Markdown document in document order.

    Raises:
        DocumentStructureError: a fenced block is opened but never closed.
    """
    text = normalize_newlines(text)
    line_starts = compute_line_starts(text)

    for token in _MD.parse(text):
        if token.type not in ("fence", "code_block") or token.map is None:
            continue
        first_line, end_line = token.map

        if token.type == "fence":
            closing = end_line - 1
            if not _has_closing_fence(first_line, end_line, token.content):
                offset = _line_offset(first_line, line_starts, len(text))
                raise DocumentStructureError(
                    f"code block opened with {token.markup!r} is never closed",
                    source=source,
                    offset=offset,
                    line=first_line + 1,
                )
            body_start = _line_offset(first_line + 1, line_starts, len(text))
            body_end = _line_offset(closing, line_starts, len(text))
            body_line = first_line + 2
            info = token.info.strip()
        else:
            body_start = _line_offset(first_line, line_starts, len(text))
            body_end = _line_offset(end_line, line_starts, len(text))
            body_line = first_line + 1
            info = ""

        block = CodeBlock(
            language=language_of(info),
            info=info,
            body=token.content,
            offset=body_start,
            end=body_end,
            line=first_line + 1,
            body_line=body_line,
            source=source,
        )
        log.debug(
            "%s:%d: %s block (%r), %d chars",
            source, block.line, token.type, block.language, len(block.body),
        )
        yield block
