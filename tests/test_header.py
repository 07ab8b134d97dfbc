"""Tests for section header detection."""

import pytest

from draft.header import parse_header
from draft.syntax import WebSyntax


class TestParseHeader:
    def test_start_header(self) -> None:
        header = parse_header("⟨greet⟩≡\nhello\n")
        assert header.found is True
        assert header.raw_name == "greet"
        assert header.key == "greet"
        assert header.is_first is True
        assert header.body == "hello\n"
        assert header.body_offset == len("⟨greet⟩≡\n")

    def test_continuation_header(self) -> None:
        header = parse_header("⟨greet⟩+≡\nworld\n")
        assert header.key == "greet"
        assert header.is_first is False
        assert header.body == "world\n"

    def test_name_spanning_lines_is_normalized(self) -> None:
        header = parse_header("⟨read the\n   input file⟩≡\ncode\n")
        assert header.raw_name == "read the\n   input file"
        assert header.key == "read the input file"
        assert header.body == "code\n"

    def test_leading_whitespace_and_trailing_blanks(self) -> None:
        header = parse_header("\n  ⟨x⟩≡ \t\r\nbody\n")
        assert header.key == "x"
        assert header.body == "body\n"

    def test_code_on_the_header_line(self) -> None:
        header = parse_header("⟨x⟩≡ let y = 1;\n")
        assert header.key == "x"
        assert header.body == "let y = 1;\n"

    def test_explicit_root_header(self) -> None:
        header = parse_header("⟨⟩≡\nmain();\n")
        assert header.found is True
        assert header.key == ""
        assert header.is_first is True
        assert header.body == "main();\n"

    def test_header_without_body(self) -> None:
        header = parse_header("⟨empty⟩≡")
        assert header.key == "empty"
        assert header.body == ""

    @pytest.mark.parametrize(
        "body",
        [
            'fn a () { "bee" }\n',
            "⟨helper⟩\nmain();\n",          # reference, no assignment marker
            "⟨a⟨b⟩≡\ncode\n",              # unbalanced delimiters
            "⟨unclosed≡\ncode\n",
            "let x = 1; ⟨late⟩≡\n",         # not the first token
            "",
        ],
    )
    def test_no_header_returns_body_unchanged(self, body: str) -> None:
        header = parse_header(body)
        assert header.found is False
        assert header.raw_name == ""
        assert header.key == ""
        assert header.is_first is False
        assert header.body == body
        assert header.body_offset == 0

    def test_custom_syntax(self) -> None:
        syntax = WebSyntax(open="<<", close=">>", continuation="+", assignment="=")
        header = parse_header("<<setup>>+=\nimport os\n", syntax=syntax)
        assert header.key == "setup"
        assert header.is_first is False
        assert header.body == "import os\n"
