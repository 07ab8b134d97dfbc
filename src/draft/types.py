"""Core types for the tangle engine.

Every layer shares these types. Chunklet spans are always relative to the
body of the fragment that owns them; document-level positions live on the
block/fragment (``offset``, ``line``). All dataclasses use slots=True.

Type hierarchy:
  Ok[T] / Err[E]   : Strict algebraic Result type
  SourceSpan       : Half-open span into a fragment body
  Chunklet         : Literal text or an embedded section reference
  CodeBlock        : One code block as discovered by the scanner
  Fragment         : One occurrence of a named section's body
  ReferenceSite    : Where a section reference appears
  WeaveFailure     : Typed failure for section resolution
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Literal, TypeAlias, TypeVar

if TYPE_CHECKING:
    from draft.syntax import WebSyntax


ChunkletKind: TypeAlias = Literal["text", "reference"]
FailureReason: TypeAlias = Literal["section_not_found", "cycle_detected", "unresolved_reference"]

T = TypeVar("T")
E = TypeVar("E")


# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E].

    Usage::

        match weaver.resolve(""):
            case Ok(value=w): print(w.text)
            case Err(error=e): print(e.reason)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E]."""
    error: E


Result: TypeAlias = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Spans and chunklets
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open span ``[char_start, char_end)`` into a fragment body."""

    char_start: int
    char_end: int

    def __post_init__(self) -> None:
        if self.char_start < 0:
            raise ValueError(f"char_start must be >= 0, got {self.char_start}")
        if self.char_end < self.char_start:
            raise ValueError(
                f"char_end must be >= char_start, got {self.char_end} < {self.char_start}",
            )

    def slice(self, text: str) -> str:
        return text[self.char_start:self.char_end]


@dataclass(frozen=True, slots=True)
class Chunklet:
    """Literal text or a still-bracketed section reference."""

    kind: ChunkletKind
    span: SourceSpan

    @property
    def is_reference(self) -> bool:
        return self.kind == "reference"

    def raw(self, body: str) -> str:
        return self.span.slice(body)

    def key(self, body: str, syntax: WebSyntax) -> str:
        """Normalized name of the referenced section."""
        if not self.is_reference:
            raise ValueError("only reference chunklets have a key")
        return syntax.reference_key(self.raw(body))


# ---------------------------------------------------------------------------
# Blocks and fragments
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CodeBlock:
    """A code block found by the scanner."""

    language: str       # first word of the info string, "" if none
    info: str           # full info string
    body: str           # block content, fences excluded
    offset: int         # char offset of the body in the document
    end: int            # char offset just past the body
    line: int           # 1-based line of the opening fence
    body_line: int      # 1-based line of body[0]
    source: str = "<string>"


@dataclass(frozen=True, slots=True)
class Fragment:
    """One instance of a named section's code body."""

    key: str                        # normalized section name ("" = root)
    raw_name: str
    body: str                       # block body with the header line removed
    chunklets: tuple[Chunklet, ...]
    starts_section: bool            # False for "+≡" continuations and headerless blocks
    has_header: bool
    language: str
    offset: int                     # char offset of ``body`` in the document
    line: int                       # 1-based document line of ``body[0]``
    source: str = "<string>"

    def references(self) -> list[Chunklet]:
        return [c for c in self.chunklets if c.is_reference]

    def line_of(self, position: int) -> int:
        """Document line of a position inside ``body``."""
        return self.line + self.body.count("\n", 0, position)


@dataclass(frozen=True, slots=True)
class ReferenceSite:
    """A section reference together with where it was written."""

    key: str          # referenced section, normalized
    raw: str          # bracketed reference as written
    from_key: str     # section whose fragment contains the reference
    source: str
    offset: int       # document offset of the reference
    line: int

    def location(self) -> str:
        return f"{self.source}:{self.line}"


@dataclass(frozen=True, slots=True)
class WebDiagnostic:
    """Informational finding about how fragments start and continue sections."""

    kind: str         # "continuation_without_start" | "duplicate_start"
    key: str
    source: str
    line: int
    message: str


# ---------------------------------------------------------------------------
# Weaving results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Weaving:
    """Fully expanded text of one section."""

    key: str
    text: str
    unresolved: tuple[ReferenceSite, ...] = ()


@dataclass(frozen=True, slots=True)
class WeaveFailure:
    """Typed failure for section resolution."""

    reason: FailureReason
    key: str                            # section that was requested
    path: tuple[str, ...] = ()          # resolution path, for cycles
    unresolved: tuple[ReferenceSite, ...] = ()

    def describe(self) -> str:
        if self.reason == "cycle_detected":
            chain = " -> ".join(_display_key(k) for k in self.path)
            return f"cyclic section reference: {chain}"
        if self.reason == "unresolved_reference":
            names = sorted({site.key for site in self.unresolved})
            listed = ", ".join(_display_key(n) for n in names)
            return f"unresolved section reference(s) while weaving {_display_key(self.key)}: {listed}"
        return f"section not found: {_display_key(self.key)}"


def _display_key(key: str) -> str:
    return repr(key) if key else "<root>"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class DraftError(Exception):
    """Base class for tangle errors."""


class ConfigError(DraftError, ValueError):
    """Raised when a configuration value is missing, unknown or mistyped."""


class DocumentStructureError(DraftError, ValueError):
    """Raised when a code block is opened but never closed."""

    def __init__(self, message: str, *, source: str, offset: int, line: int) -> None:
        super().__init__(f"{source}:{line}: {message} (offset {offset})")
        self.source = source
        self.offset = offset
        self.line = line


class DocumentEncodingError(DraftError, ValueError):
    """Raised when an input document is not valid UTF-8."""


class WeaveError(DraftError, RuntimeError):
    """Raised when weaving cannot produce complete output."""

    def __init__(self, failure: WeaveFailure) -> None:
        super().__init__(failure.describe())
        self.failure = failure


class CyclicReferenceError(WeaveError):
    """A section references itself, directly or transitively."""


class UnresolvedReferenceError(WeaveError):
    """Strict weaving met a reference to an undefined section."""
