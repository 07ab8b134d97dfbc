"""Tests for Markdown code block discovery."""

import pytest

from draft.scanner import compute_line_starts, language_of, scan_code_blocks
from draft.types import DocumentStructureError


DOC = """\
# Title

Some prose with `inline code` that is not a block.

```
Cargo? What cargo?
```

```rust ignore
fn main() {}
```
"""


class TestScanCodeBlocks:
    def test_finds_fenced_blocks_in_order(self) -> None:
        blocks = list(scan_code_blocks(DOC, source="doc.md"))
        assert [b.language for b in blocks] == ["", "rust"]
        assert [b.body for b in blocks] == ["Cargo? What cargo?\n", "fn main() {}\n"]
        assert blocks[1].info == "rust ignore"
        assert all(b.source == "doc.md" for b in blocks)

    def test_offsets_point_at_the_body(self) -> None:
        for block in scan_code_blocks(DOC):
            assert DOC[block.offset:block.end] == block.body

    def test_lines_are_one_based(self) -> None:
        blocks = list(scan_code_blocks(DOC))
        assert blocks[0].line == 5
        assert blocks[0].body_line == 6
        assert blocks[1].line == 9
        assert blocks[1].body_line == 10

    def test_tilde_fence_and_longer_closing_fence(self) -> None:
        text = "~~~python\nx = 1\n~~~~\n\n````rust\nlet y = 2;\n`````\n"
        blocks = list(scan_code_blocks(text))
        assert [(b.language, b.body) for b in blocks] == [
            ("python", "x = 1\n"),
            ("rust", "let y = 2;\n"),
        ]

    def test_indented_code_has_no_language(self) -> None:
        blocks = list(scan_code_blocks("para\n\n    indented\n"))
        assert len(blocks) == 1
        assert blocks[0].language == ""
        assert blocks[0].body == "indented\n"

    def test_crlf_is_folded(self) -> None:
        blocks = list(scan_code_blocks("```rust\r\nx\r\n```\r\n"))
        assert blocks[0].body == "x\n"

    def test_empty_block(self) -> None:
        blocks = list(scan_code_blocks("```rust\n```\n"))
        assert blocks[0].body == ""
        assert blocks[0].offset == blocks[0].end

    def test_scanning_is_lazy(self) -> None:
        blocks = scan_code_blocks("```rust\na\n```\n\n```rust\nb\n```\n")
        assert next(blocks).body == "a\n"
        assert next(blocks).body == "b\n"
        with pytest.raises(StopIteration):
            next(blocks)

    def test_document_without_code(self) -> None:
        assert list(scan_code_blocks("# Only prose\n\ntext\n")) == []


class TestUnclosedBlocks:
    def test_unclosed_fence_raises_with_location(self) -> None:
        text = "intro\n\n```rust\nfn main() {}\n"
        with pytest.raises(DocumentStructureError) as excinfo:
            list(scan_code_blocks(text, source="broken.md"))
        err = excinfo.value
        assert err.source == "broken.md"
        assert err.line == 3
        assert err.offset == text.index("```")
        assert "never closed" in str(err)

    def test_fence_opened_on_last_line(self) -> None:
        with pytest.raises(DocumentStructureError):
            list(scan_code_blocks("text\n\n```rust"))

    def test_closing_fence_indented_four_spaces_is_content(self) -> None:
        with pytest.raises(DocumentStructureError):
            list(scan_code_blocks("```rust\nfn main() {}\n    ```\n"))

    def test_closing_fence_indented_three_spaces_closes(self) -> None:
        (block,) = scan_code_blocks("```rust\nfn main() {}\n   ```\n")
        assert block.body == "fn main() {}\n"

    def test_fence_inside_blockquote_closes(self) -> None:
        (block,) = scan_code_blocks("> ```rust\n> fn main() {}\n> ```\n")
        assert block.body == "fn main() {}\n"

    def test_blocks_before_the_broken_one_are_yielded(self) -> None:
        blocks = scan_code_blocks("```rust\nok\n```\n\n```rust\nbroken\n")
        assert next(blocks).body == "ok\n"
        with pytest.raises(DocumentStructureError):
            next(blocks)


class TestHelpers:
    def test_language_of(self) -> None:
        assert language_of("rust") == "rust"
        assert language_of("  python  title=x ") == "python"
        assert language_of("") == ""

    def test_compute_line_starts(self) -> None:
        assert compute_line_starts("ab\ncd\n") == [0, 3, 6]
        assert compute_line_starts("") == [0]
