"""
Parser
======

Recursive-descent parser that turns a token stream into
:class:`~gbasm_parser.models.Statement` nodes, one directive at a time.

Grammar (keywords are matched case-insensitively):

+----------------------------------+--------------------------------------+
| Source form                      | Statement                            |
+==================================+======================================+
| ``; anything``                   | (nothing – skipped to the line end)  |
+----------------------------------+--------------------------------------+
| ``INCLUDE "path"``               | ``Include(path)``                    |
+----------------------------------+--------------------------------------+
| ``SECTION "name", TYPE``         | ``Section(name, section_type)``      |
+----------------------------------+--------------------------------------+
| ``IF …`` … ``ENDC``              | ``If()`` – body discarded, flat scan |
+----------------------------------+--------------------------------------+
| ``NEWCHARMAP name``              | ``NewCharMap(name)``                 |
+----------------------------------+--------------------------------------+
| ``SETCHARMAP name``              | ``SetCharMap(name)``                 |
+----------------------------------+--------------------------------------+
| ``CHARMAP "value", $HEX``        | ``CharMap(value, code)``             |
+----------------------------------+--------------------------------------+
| ``[DEF] NAME EQU raw text``      | ``Def(name, value)``                 |
+----------------------------------+--------------------------------------+

Handlers raise a :class:`~gbasm_parser.errors.ParseError` subclass on the
first violated expectation.  :func:`parse_ast` stops at that error and hands
it back together with the statements read before it; nothing is retried and
no partial statement is kept.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from ..cursor import Cursor
from ..errors import (
    InvalidNumberError,
    MissingCommaError,
    MissingIdentifierError,
    MissingNumberError,
    MissingQuoteError,
    NoTokensLeft,
    ParseError,
    UnsupportedTokenError,
)
from ..models import (
    BLANK_KINDS,
    WHITESPACE_KINDS,
    Ast,
    CharMap,
    Def,
    If,
    Include,
    NewCharMap,
    ParseResult,
    Section,
    SetCharMap,
    Statement,
    Token,
    TokenKind,
)

logger = logging.getLogger(__name__)


class Parser:
    """
    Stateful parser over a single pass of *tokens*.

    *tokens* may be any iterable – a list from
    :func:`~gbasm_parser.lexer.lexer.lex_content` or a live
    :class:`~gbasm_parser.lexer.lexer.Lexer`.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._cursor: Cursor[Token] = Cursor(tokens)
        self._keyword: Optional[Token] = None
        self._handlers: Dict[str, Callable[[], Statement]] = {
            "include": self._parse_include,
            "section": self._parse_section,
            "if": self._parse_if,
            "newcharmap": self._parse_new_charmap,
            "setcharmap": self._parse_set_charmap,
            "charmap": self._parse_charmap,
            "def": self._parse_def_keyword,
        }

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def next_statement(self) -> Statement:
        """
        Parse and return the next statement.

        Raises
        ------
        NoTokensLeft
            When only whitespace and comments remain.
        ParseError
            For any malformed or unrecognised directive.
        """
        while True:
            self._skip_blanks()
            token = self._cursor.current
            if token is None:
                raise NoTokensLeft("no tokens left")
            if token.kind is TokenKind.SEMICOLON:
                self._skip_comment()
                continue
            break

        if token.kind is not TokenKind.IDENTIFIER:
            raise UnsupportedTokenError("unsupported token found")

        handler = self._handlers.get(token.literal.lower())
        if handler is not None:
            self._keyword = token
            self._cursor.advance()
            stmt = handler()
        else:
            stmt = self._parse_assignment(token)

        logger.debug("Parsed %r", stmt)
        return stmt

    def statements(self) -> Iterator[Statement]:
        """Yield statements lazily until the tokens run out."""
        while True:
            try:
                yield self.next_statement()
            except NoTokensLeft:
                return

    # ------------------------------------------------------------------
    # Directive handlers (cursor sits just past the keyword)
    # ------------------------------------------------------------------

    def _parse_include(self) -> Include:
        self._skip_blanks()
        self._expect_quote("missing quote after include")
        return Include(path=self._read_string())

    def _parse_section(self) -> Section:
        self._skip_blanks()
        self._expect_quote("missing quote after section")
        name = self._read_string()

        self._skip_blanks()
        self._expect_comma("missing comma after section name")
        self._skip_blanks()

        type_token = self._cursor.current
        if type_token is None:
            raise MissingIdentifierError("missing section type")
        self._cursor.advance()
        return Section(name=name, section_type=type_token.literal)

    def _parse_if(self) -> If:
        # Flat scan: the first ENDC closes the block, nested IFs included.
        while self._cursor.current is not None:
            token = self._cursor.current
            self._cursor.advance()
            if token.is_keyword("endc"):
                break
        return If()

    def _parse_new_charmap(self) -> NewCharMap:
        return NewCharMap(name=self._read_name("no identifier after newcharmap"))

    def _parse_set_charmap(self) -> SetCharMap:
        return SetCharMap(name=self._read_name("no identifier after setcharmap"))

    def _parse_charmap(self) -> CharMap:
        self._skip_blanks()
        self._expect_quote("missing quote after charmap")
        value = self._read_string()

        self._skip_blanks()
        self._expect_comma("missing comma after charmap value")
        self._skip_blanks()

        number = self._cursor.current
        if number is None or number.kind is not TokenKind.NUMBER:
            raise MissingNumberError("missing number after charmap value")
        try:
            code = int(number.literal, 16)
        except ValueError:
            raise InvalidNumberError("invalid hexadecimal number in charmap") from None
        self._cursor.advance()
        return CharMap(value=value, code=code)

    def _parse_def_keyword(self) -> Def:
        keyword = self._keyword
        self._skip_inline_blanks()
        token = self._cursor.current
        if keyword is not None and token is not None and token.is_keyword("equ"):
            # ``def EQU value`` defines a symbol named def.
            self._cursor.advance()
            return Def(name=keyword.literal, value=self._read_raw_value())
        if token is None or token.kind is not TokenKind.IDENTIFIER:
            raise MissingIdentifierError("no identifier after def")
        return self._parse_assignment(token)

    def _parse_assignment(self, name: Token) -> Def:
        """``NAME EQU value`` with the cursor on ``NAME``."""
        # A bare name at the end of a line can never be a definition.
        following = self._cursor.peek()
        if following is None or following.kind is TokenKind.LINE_BREAK:
            raise UnsupportedTokenError("unsupported token found")

        self._cursor.advance()
        self._skip_inline_blanks()
        if self._cursor.current is None or not self._cursor.current.is_keyword("equ"):
            raise UnsupportedTokenError("unsupported token found")
        self._cursor.advance()
        return Def(name=name.literal, value=self._read_raw_value())

    def _read_raw_value(self) -> str:
        """Source text after ``EQU`` up to, not including, the line-break."""
        self._skip_inline_blanks()
        parts: List[str] = []
        while (
            self._cursor.current is not None
            and self._cursor.current.kind is not TokenKind.LINE_BREAK
        ):
            parts.append(self._cursor.current.source)
            self._cursor.advance()
        return "".join(parts)

    # ------------------------------------------------------------------
    # Shared primitives
    # ------------------------------------------------------------------

    def _skip_blanks(self) -> None:
        """Skip spaces, tabs and line-breaks."""
        while (
            self._cursor.current is not None
            and self._cursor.current.kind in WHITESPACE_KINDS
        ):
            self._cursor.advance()

    def _skip_inline_blanks(self) -> None:
        """Skip spaces and tabs, stopping at a line-break."""
        while (
            self._cursor.current is not None
            and self._cursor.current.kind in BLANK_KINDS
        ):
            self._cursor.advance()

    def _skip_comment(self) -> None:
        """Discard everything up to and including the next line-break."""
        while self._cursor.current is not None:
            kind = self._cursor.current.kind
            self._cursor.advance()
            if kind is TokenKind.LINE_BREAK:
                break

    def _read_string(self) -> str:
        """
        Read a quoted string with the cursor on its opening quote.

        An unterminated string runs to the end of input without an error.
        """
        self._cursor.advance()
        parts: List[str] = []
        while (
            self._cursor.current is not None
            and self._cursor.current.kind is not TokenKind.DOUBLE_QUOTE
        ):
            parts.append(self._cursor.current.source)
            self._cursor.advance()
        self._cursor.advance()
        return "".join(parts)

    def _read_name(self, error_message: str) -> str:
        self._skip_blanks()
        token = self._cursor.current
        if token is None or token.kind is not TokenKind.IDENTIFIER:
            raise MissingIdentifierError(error_message)
        self._cursor.advance()
        return token.literal

    def _expect_quote(self, error_message: str) -> None:
        """Check for an opening quote; :meth:`_read_string` consumes it."""
        if not self._at(TokenKind.DOUBLE_QUOTE):
            raise MissingQuoteError(error_message)

    def _expect_comma(self, error_message: str) -> None:
        if not self._at(TokenKind.COMMA):
            raise MissingCommaError(error_message)
        self._cursor.advance()

    def _at(self, kind: TokenKind) -> bool:
        token = self._cursor.current
        return token is not None and token.kind is kind


# ---------------------------------------------------------------------------
# Top-level driving loop
# ---------------------------------------------------------------------------


def parse_ast(tokens: Iterable[Token]) -> ParseResult:
    """
    Parse every statement in *tokens*.

    Running out of tokens ends the parse normally.  Any other
    :class:`ParseError` stops it: the result then carries that error and the
    statements parsed before it.
    """
    parser = Parser(tokens)
    statements: List[Statement] = []
    error: Optional[ParseError] = None
    while True:
        try:
            statements.append(parser.next_statement())
        except NoTokensLeft:
            break
        except ParseError as exc:
            error = exc
            break
    return ParseResult(ast=Ast(tuple(statements)), error=error)
