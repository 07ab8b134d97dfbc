"""Run configuration for the tangle engine.

Loaded from a JSON file so that a project can pin its language tag, root
section, marker format and delimiters once instead of repeating CLI flags::

    {
      "language": "python",
      "root": "",
      "strict": true,
      "marker": "\\n# {name}\\n",
      "delimiters": {"open": "<<", "close": ">>"}
    }

Every key is optional; unknown keys are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import orjson

from draft.syntax import WebSyntax
from draft.types import ConfigError
from draft.weaver import DEFAULT_MARKER, render_marker

_KNOWN_KEYS = frozenset({"language", "root", "strict", "marker", "delimiters"})
_DELIMITER_KEYS = frozenset({"open", "close", "continuation", "assignment"})


def _default_delimiters() -> dict[str, str]:
    return WebSyntax().to_dict()


@dataclass(frozen=True, slots=True)
class TangleConfig:
    """Settings for one tangle run."""

    language: str = "rust"
    root: str = ""
    strict: bool = False
    marker: str = DEFAULT_MARKER
    delimiters: dict[str, str] = field(default_factory=_default_delimiters)

    def __post_init__(self) -> None:
        if not isinstance(self.language, str) or not self.language:
            raise ConfigError("language must be a non-empty string")
        if not isinstance(self.root, str):
            raise ConfigError("root must be a string")
        if not isinstance(self.strict, bool):
            raise ConfigError("strict must be true or false")
        if not isinstance(self.marker, str):
            raise ConfigError("marker must be a string")
        try:
            render_marker(self.marker, reference="", name="")
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"invalid marker template {self.marker!r}: {exc}") from exc
        unknown = set(self.delimiters) - _DELIMITER_KEYS
        if unknown:
            raise ConfigError(f"unknown delimiter key(s): {', '.join(sorted(unknown))}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TangleConfig:
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigError(f"unknown configuration key(s): {', '.join(sorted(unknown))}")
        delimiters = data.get("delimiters", {})
        if not isinstance(delimiters, dict):
            raise ConfigError("delimiters must be an object")
        return cls(
            language=data.get("language", "rust"),
            root=data.get("root", ""),
            strict=data.get("strict", False),
            marker=data.get("marker", DEFAULT_MARKER),
            delimiters={**_default_delimiters(), **delimiters},
        )

    @classmethod
    def from_json(cls, path: Path) -> TangleConfig:
        """Load from a JSON config file."""
        try:
            data = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as exc:
            raise ConfigError(f"{path}: invalid JSON: {exc}") from exc
        return cls.from_dict(data)

    def with_overrides(self, **overrides: Any) -> TangleConfig:
        """Copy with the non-None overrides applied (CLI flags win over the file)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def syntax(self) -> WebSyntax:
        try:
            return WebSyntax(**self.delimiters)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid delimiters: {exc}") from exc
