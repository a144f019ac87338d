"""
gbasm_parser – command-line interface
======================================

Usage
-----
::

    python -m gbasm_parser.cli SOURCE [OPTIONS]

Options
-------
--output, -o          Output file path (default: stdout).
--format, -f          Output format: ``json`` (default), ``text`` or ``tokens``.
--verbose, -v         Enable DEBUG logging (includes lex/parse timings).

Exit codes
----------
0  every statement parsed
1  parsing stopped at an error (statements read before it are still output)
2  the source file could not be read

Examples
--------
::

    python -m gbasm_parser.cli game.asm
    python -m gbasm_parser.cli game.asm -f text
    python -m gbasm_parser.cli game.asm -f tokens -o tokens.json
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .pipeline.source_analysis import SourceAnalysis


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gbasm_parser",
        description="gbasm_parser – parse assembler directives into an AST",
    )
    p.add_argument("source", help="Assembler source file to parse")
    p.add_argument(
        "--output", "-o",
        default="-",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    p.add_argument(
        "--format", "-f",
        choices=["json", "text", "tokens"],
        default="json",
        help="Output format (default: json)",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return p


def _write(output_text: str, output: str) -> None:
    if output == "-":
        print(output_text)
    else:
        Path(output).write_text(output_text + "\n", encoding="utf-8")
        print(f"Output written to {output}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    analysis = SourceAnalysis()

    # ------------------------------------------------------------------
    # Token dump mode
    # ------------------------------------------------------------------
    if args.format == "tokens":
        try:
            tokens = analysis.tokens_from_file(args.source)
        except OSError as exc:
            print(f"error: cannot read {args.source}: {exc}", file=sys.stderr)
            return 2
        _write(json.dumps([t.to_dict() for t in tokens], indent=2), args.output)
        return 0

    # ------------------------------------------------------------------
    # Statement mode
    # ------------------------------------------------------------------
    try:
        result = analysis.parse_file(args.source)
    except OSError as exc:
        print(f"error: cannot read {args.source}: {exc}", file=sys.stderr)
        return 2

    if args.format == "json":
        output_text = json.dumps(result.to_dict(), indent=2)
    else:
        output_text = result.ast.render()
    _write(output_text, args.output)

    if result.error is not None:
        print(f"error: {result.error.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
