"""
SourceAnalysis
==============

Runs the front end over a whole source and returns a
:class:`~gbasm_parser.models.ParseResult`.

Pipeline stages:

1. Line joining – every source line is terminated with a line-break, since
   line boundaries end comments and ``EQU`` values.
2. :class:`~gbasm_parser.lexer.lexer.Lexer` – characters to tokens.
3. :func:`~gbasm_parser.parser.directive_parser.parse_ast` – tokens to
   statements.

Tokens are streamed from the lexer straight into the parser.  A parse error
is logged here and returned in the result, never raised.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, List

from ..lexer.lexer import Lexer, join_lines, lex_content, split_lines
from ..models import ParseResult, Token
from ..parser.directive_parser import parse_ast

logger = logging.getLogger(__name__)


class SourceAnalysis:
    """High-level entry point for parsing assembler sources."""

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def parse_file(self, file_path: str) -> ParseResult:
        """
        Read and parse an assembler source **file**.

        ``OSError`` from reading the file propagates to the caller.
        """
        logger.info("Parsing file: %s", file_path)
        lines = split_lines(_read_source(file_path))
        return self.parse_lines(lines)

    def parse_text(self, source: str) -> ParseResult:
        """Parse source supplied as a **string**."""
        return self.parse_lines(split_lines(source))

    def parse_lines(self, lines: Iterable[str]) -> ParseResult:
        """Parse a sequence of source lines (without line terminators)."""
        start = time.perf_counter()
        result = parse_ast(Lexer(join_lines(lines)))
        logger.debug("Lex + parse: %.6fs", time.perf_counter() - start)

        if result.error is not None:
            logger.warning(
                "Parsing stopped after %d statement(s): %s",
                len(result.ast),
                result.error.message,
            )
        else:
            logger.info("Parsed %d statement(s)", len(result.ast))
        return result

    def tokens(self, lines: Iterable[str]) -> List[Token]:
        """Tokenize *lines* without parsing them."""
        start = time.perf_counter()
        tokens = lex_content(lines)
        logger.debug("Lex content: %.6fs (%d tokens)", time.perf_counter() - start, len(tokens))
        return tokens

    def tokens_from_file(self, file_path: str) -> List[Token]:
        lines = split_lines(_read_source(file_path))
        return self.tokens(lines)


def _read_source(file_path: str) -> str:
    # Decoded from bytes so no newline translation happens before splitting.
    return Path(file_path).read_bytes().decode("utf-8", errors="replace")
