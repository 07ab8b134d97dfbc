"""Literate-programming tangle engine: Markdown code fragments -> source text."""

from draft.config import TangleConfig
from draft.header import SectionHeader, parse_header
from draft.lexer import tokenize_body
from draft.normalization import normalize_key
from draft.scanner import scan_code_blocks
from draft.syntax import DEFAULT_SYNTAX, WebSyntax
from draft.types import (
    Chunklet,
    CodeBlock,
    ConfigError,
    CyclicReferenceError,
    DocumentEncodingError,
    DocumentStructureError,
    DraftError,
    Err,
    Fragment,
    Ok,
    ReferenceSite,
    Result,
    SourceSpan,
    UnresolvedReferenceError,
    WeaveError,
    WeaveFailure,
    Weaving,
    WebDiagnostic,
)
from draft.weaver import DEFAULT_MARKER, Weaver, weave
from draft.web import Web, build_web, make_fragment

__version__ = "0.2.0"

__all__ = [
    "Chunklet",
    "CodeBlock",
    "ConfigError",
    "CyclicReferenceError",
    "DEFAULT_MARKER",
    "DEFAULT_SYNTAX",
    "DocumentEncodingError",
    "DocumentStructureError",
    "DraftError",
    "Err",
    "Fragment",
    "Ok",
    "ReferenceSite",
    "Result",
    "SectionHeader",
    "SourceSpan",
    "TangleConfig",
    "UnresolvedReferenceError",
    "WeaveError",
    "WeaveFailure",
    "Weaver",
    "Weaving",
    "Web",
    "WebDiagnostic",
    "WebSyntax",
    "build_web",
    "make_fragment",
    "normalize_key",
    "parse_header",
    "scan_code_blocks",
    "tokenize_body",
    "weave",
]
