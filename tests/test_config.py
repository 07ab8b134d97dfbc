"""Tests for TangleConfig loading and overrides."""

import json
from pathlib import Path

import pytest

from draft.config import TangleConfig
from draft.syntax import DEFAULT_SYNTAX
from draft.types import ConfigError
from draft.weaver import DEFAULT_MARKER


class TestDefaults:
    def test_defaults(self) -> None:
        config = TangleConfig()
        assert config.language == "rust"
        assert config.root == ""
        assert config.strict is False
        assert config.marker == DEFAULT_MARKER
        assert config.syntax() == DEFAULT_SYNTAX


class TestFromJson:
    def test_load_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "draft.json"
        path.write_text(
            json.dumps(
                {
                    "language": "python",
                    "root": "main",
                    "strict": True,
                    "marker": "\n# {name}\n",
                    "delimiters": {"open": "<<", "close": ">>", "assignment": "="},
                }
            ),
            encoding="utf-8",
        )
        config = TangleConfig.from_json(path)
        assert config.language == "python"
        assert config.root == "main"
        assert config.strict is True
        syntax = config.syntax()
        assert (syntax.open, syntax.close, syntax.continuation, syntax.assignment) == ("<<", ">>", "+", "=")

    def test_empty_object_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "draft.json"
        path.write_text("{}", encoding="utf-8")
        assert TangleConfig.from_json(path) == TangleConfig()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "draft.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            TangleConfig.from_json(path)


class TestValidation:
    @pytest.mark.parametrize(
        "data",
        [
            {"langauge": "rust"},
            {"language": ""},
            {"language": 3},
            {"strict": "yes"},
            {"root": None},
            {"marker": "{missing}"},
            {"marker": "{"},
            {"marker": "{reference.x}"},
            {"marker": "{name[x]}"},
            {"delimiters": []},
            {"delimiters": {"middle": "|"}},
            [],
        ],
    )
    def test_bad_values_raise(self, data: object) -> None:
        with pytest.raises(ConfigError):
            TangleConfig.from_dict(data)  # type: ignore[arg-type]

    def test_bad_delimiters_fail_when_building_syntax(self) -> None:
        config = TangleConfig.from_dict({"delimiters": {"open": "|", "close": "|"}})
        with pytest.raises(ConfigError):
            config.syntax()


class TestOverrides:
    def test_none_values_are_ignored(self) -> None:
        config = TangleConfig(language="python")
        assert config.with_overrides(language=None, strict=None) is config

    def test_flags_win(self) -> None:
        config = TangleConfig(language="python").with_overrides(language="go", strict=True, root="x")
        assert (config.language, config.strict, config.root) == ("go", True, "x")

    def test_overrides_are_validated(self) -> None:
        with pytest.raises(ConfigError):
            TangleConfig().with_overrides(marker="{nope}")
