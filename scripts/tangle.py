#!/usr/bin/env python3
"""Extract source code from literate Markdown documents.

Collects the code blocks tagged with the configured language, assembles the
named sections they define, and prints the fully expanded root section.

Usage:
    # Tangle the root section of a Rust literate document
    python3 scripts/tangle.py README.md

    # Tangle a named section from several documents, failing on dangling refs
    python3 scripts/tangle.py intro.md parser.md --language python \
      --section "parser module" --strict

    # Inspect the scanned block stream (JSON Lines)
    python3 scripts/tangle.py README.md --debug

    # Report unresolved references and header problems (JSON)
    python3 scripts/tangle.py README.md --check
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from draft.config import TangleConfig
from draft.io_utils import read_document, write_json, write_jsonl
from draft.lexer import chunklets_to_dicts
from draft.normalization import normalize_key
from draft.scanner import scan_code_blocks
from draft.syntax import WebSyntax
from draft.types import DraftError, Err, Ok
from draft.weaver import Weaver
from draft.web import Web, make_fragment

log = logging.getLogger("tangle")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract source code from literate Markdown files."
    )
    parser.add_argument(
        "inputs", nargs="+", type=Path, help="Markdown input file(s)"
    )
    parser.add_argument(
        "--language",
        default=None,
        help="Code block language tag to extract (default: from config, else 'rust').",
    )
    parser.add_argument(
        "--section",
        default=None,
        help="Section to weave (default: the root section, i.e. headerless blocks).",
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to a JSON config file."
    )
    parser.add_argument(
        "--marker",
        default=None,
        help="Marker template inserted before each expansion; {reference} and {name} are filled in.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail if any section reference cannot be resolved.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Print the scanned code block stream instead of weaving.",
    )
    mode.add_argument(
        "--check",
        action="store_true",
        help="Report unresolved references and header problems as JSON.",
    )
    mode.add_argument(
        "--list-roots",
        action="store_true",
        help="Print the names of sections that nothing references.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose logging"
    )
    return parser


def _load_config(args: argparse.Namespace) -> TangleConfig:
    config = TangleConfig.from_json(args.config) if args.config else TangleConfig()
    return config.with_overrides(
        language=args.language,
        root=args.section,
        marker=args.marker,
        strict=args.strict,
    )


def _print_blocks(documents: list[tuple[str, str]], syntax: WebSyntax) -> int:
    def rows():
        for source, text in documents:
            for block in scan_code_blocks(text, source=source):
                fragment = make_fragment(block, syntax=syntax)
                yield {
                    "source": block.source,
                    "language": block.language,
                    "info": block.info,
                    "offset": block.offset,
                    "end": block.end,
                    "line": block.line,
                    "key": fragment.key,
                    "first": fragment.starts_section,
                    "chunklets": chunklets_to_dicts(fragment.body, fragment.chunklets),
                }

    write_jsonl(list(rows()))
    return 0


def _check(web: Web) -> int:
    unresolved = web.unresolved_references()
    report = {
        "language": web.language,
        "sections": len(web),
        "unresolved": [
            {
                "name": name,
                "locations": [
                    {"location": site.location(), "from": site.from_key, "raw": site.raw}
                    for site in sites
                ],
            }
            for name, sites in unresolved.items()
        ],
        "diagnostics": [
            {
                "kind": diag.kind,
                "name": diag.key,
                "location": f"{diag.source}:{diag.line}",
                "message": diag.message,
            }
            for diag in web.lint()
        ],
    }
    write_json(report)
    return 1 if unresolved else 0


def run(args: argparse.Namespace) -> int:
    config = _load_config(args)
    syntax = config.syntax()

    documents: list[tuple[str, str]] = []
    for path in args.inputs:
        documents.append((str(path), read_document(path)))

    if args.debug:
        return _print_blocks(documents, syntax)

    web = Web(language=config.language, syntax=syntax)
    for source, text in documents:
        added = web.add_document(text, source=source)
        log.info("%s: %d %s fragment(s)", source, added, config.language)

    if args.check:
        return _check(web)
    if args.list_roots:
        for key in web.roots():
            print(key)
        return 0

    root = normalize_key(config.root)
    weaver = Weaver(web, marker=config.marker, strict=config.strict)
    match weaver.resolve(root):
        case Ok(value=weaving):
            for site in weaving.unresolved:
                log.info("%s: dropped unresolved reference %s", site.location(), site.raw)
            sys.stdout.write(weaving.text)
            return 0
        case Err(error=failure) if failure.reason == "section_not_found":
            inputs = ", ".join(str(p) for p in args.inputs)
            if root:
                print(f"Error: section {root!r} not found in {inputs}", file=sys.stderr)
            else:
                print(f"Error: no {config.language} code found in {inputs}", file=sys.stderr)
            return 1
        case Err(error=failure):
            print(f"Error: {failure.describe()}", file=sys.stderr)
            return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    try:
        return run(args)
    except (DraftError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
