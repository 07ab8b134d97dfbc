"""I/O helpers for documents and JSON / JSON Lines output.

JSON is produced with orjson; output functions write bytes to a binary
stream (``sys.stdout.buffer`` by default).
"""
from __future__ import annotations

import codecs
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any, BinaryIO

import orjson

from draft.types import DocumentEncodingError


def read_document(path: Path) -> str:
    """Read a Markdown document as UTF-8 (a leading BOM is dropped).

    Raises:
        DocumentEncodingError: the file is not valid UTF-8.
    """
    data = path.read_bytes()
    body = data.removeprefix(codecs.BOM_UTF8)
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        offset = exc.start + len(data) - len(body)
        raise DocumentEncodingError(
            f"{path}: not valid UTF-8 at byte offset {offset}: {exc.reason}"
        ) from exc


def write_json(obj: Any, stream: BinaryIO | None = None, *, pretty: bool = True) -> None:
    """Write one JSON document followed by a newline."""
    out = stream if stream is not None else sys.stdout.buffer
    opts = orjson.OPT_INDENT_2 if pretty else 0
    out.write(orjson.dumps(obj, option=opts))
    out.write(b"\n")
    out.flush()


def write_jsonl(records: Iterable[dict[str, Any]], stream: BinaryIO | None = None) -> int:
    """Write records as JSON Lines; return how many were written."""
    out = stream if stream is not None else sys.stdout.buffer
    count = 0
    for record in records:
        out.write(orjson.dumps(record))
        out.write(b"\n")
        count += 1
    out.flush()
    return count
