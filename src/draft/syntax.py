"""Section delimiters and the patterns derived from them.

A ``WebSyntax`` is built once (normally from configuration) and handed to the
header parser, the lexer, the web and the weaver. Nothing here is global
state except ``DEFAULT_SYNTAX``, which is an ordinary immutable instance.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from draft.normalization import normalize_key


@dataclass(frozen=True, slots=True)
class WebSyntax:
    """Delimiters for ``⟨name⟩≡`` headers and ``⟨name⟩`` references."""

    open: str = "⟨"
    close: str = "⟩"
    continuation: str = "+"
    assignment: str = "≡"
    header_re: re.Pattern[str] = field(init=False, repr=False, compare=False)
    reference_re: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("open", "close", "continuation", "assignment"):
            if not getattr(self, name):
                raise ValueError(f"{name} delimiter cannot be empty")
        if self.open == self.close:
            raise ValueError("open and close delimiters must differ")

        o = re.escape(self.open)
        c = re.escape(self.close)
        # Header: leading whitespace, ⟨name⟩, optional "+", "≡", trailing blanks.
        # The name may span lines but may not contain either delimiter.
        header = re.compile(
            rf"\s*{o}((?:(?!{o}|{c}).)*){c}({re.escape(self.continuation)}?)"
            rf"{re.escape(self.assignment)}[ \t\r]*",
            re.DOTALL,
        )
        # Reference: shortest ⟨...⟩, newlines allowed.
        reference = re.compile(rf"{o}.*?{c}", re.DOTALL)
        object.__setattr__(self, "header_re", header)
        object.__setattr__(self, "reference_re", reference)

    def reference_key(self, raw: str) -> str:
        """Normalized name inside a bracketed reference such as ``⟨ a  b ⟩``."""
        if not (raw.startswith(self.open) and raw.endswith(self.close)):
            raise ValueError(f"not a delimited section reference: {raw!r}")
        if len(raw) < len(self.open) + len(self.close):
            raise ValueError(f"not a delimited section reference: {raw!r}")
        return normalize_key(raw[len(self.open):len(raw) - len(self.close)])

    def to_dict(self) -> dict[str, str]:
        return {
            "open": self.open,
            "close": self.close,
            "continuation": self.continuation,
            "assignment": self.assignment,
        }


DEFAULT_SYNTAX = WebSyntax()
