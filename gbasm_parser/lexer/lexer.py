"""
Lexer
=====

Character-level tokenizer for the assembler dialect.

Classification of the character under the cursor:

+----------------------+-------------------------------------------------+
| Character            | Token                                           |
+======================+=================================================+
| ``' '`` ``\\t``      | SPACE, TAB (kept – the parser skips them)       |
+----------------------+-------------------------------------------------+
| ``\\n``              | LINE_BREAK (ends comments and ``EQU`` values)   |
+----------------------+-------------------------------------------------+
| ``/ " , . ;``        | SLASH, DOUBLE_QUOTE, COMMA, DOT, SEMICOLON      |
+----------------------+-------------------------------------------------+
| ``$``                | NUMBER – the hex digit run that follows,        |
|                      | without the ``$``                               |
+----------------------+-------------------------------------------------+
| alphabetic           | IDENTIFIER – maximal run of alphanumerics / _   |
+----------------------+-------------------------------------------------+
| anything else        | UNKNOWN – that single character                 |
+----------------------+-------------------------------------------------+

Every character ends up in some token, so the lexer never reports malformed
input; the only failure is :class:`~gbasm_parser.errors.LexerExhausted`.
"""
from __future__ import annotations

import string
from typing import Dict, Iterable, Iterator, List

from ..cursor import Cursor
from ..errors import LexerExhausted
from ..models import HEX_PREFIX, Token, TokenKind

SINGLE_CHAR_KINDS: Dict[str, TokenKind] = {
    " ": TokenKind.SPACE,
    "\t": TokenKind.TAB,
    "\n": TokenKind.LINE_BREAK,
    "/": TokenKind.SLASH,
    '"': TokenKind.DOUBLE_QUOTE,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    ";": TokenKind.SEMICOLON,
}

_HEX_DIGITS = frozenset(string.hexdigits)


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class Lexer:
    """
    Pull-based tokenizer over a complete source string.

    Call :meth:`retrieve_next_token` repeatedly, or iterate the lexer, which
    yields tokens lazily and stops at end of input.
    """

    def __init__(self, source: str) -> None:
        self._cursor: Cursor[str] = Cursor(source)

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        while True:
            try:
                yield self.retrieve_next_token()
            except LexerExhausted:
                return

    def retrieve_next_token(self) -> Token:
        """
        Return the next token.

        Raises
        ------
        LexerExhausted
            When every character has already been consumed.
        """
        ch = self._cursor.current
        if ch is None:
            raise LexerExhausted()

        kind = SINGLE_CHAR_KINDS.get(ch)
        if kind is not None:
            self._cursor.advance()
            return Token(ch, kind)

        if ch == HEX_PREFIX:
            self._cursor.advance()
            return Token(self._read_while(lambda c: c in _HEX_DIGITS), TokenKind.NUMBER)

        if ch.isalpha():
            return Token(self._read_while(_is_identifier_char), TokenKind.IDENTIFIER)

        self._cursor.advance()
        return Token(ch, TokenKind.UNKNOWN)

    def _read_while(self, accept) -> str:
        """Consume the maximal run of characters satisfying *accept*."""
        chars: List[str] = []
        while self._cursor.current is not None and accept(self._cursor.current):
            chars.append(self._cursor.current)
            self._cursor.advance()
        return "".join(chars)


def lex_content(lines: Iterable[str]) -> List[Token]:
    """
    Tokenize *lines*, terminating each one with a line-break.

    >>> [t.literal for t in lex_content(["NEWCHARMAP Main"])]
    ['NEWCHARMAP', ' ', 'Main', '\\n']
    """
    return list(Lexer(join_lines(lines)))


def join_lines(lines: Iterable[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def split_lines(text: str) -> List[str]:
    """
    Split *text* on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Other characters that :meth:`str.splitlines` treats as boundaries (a lone
    ``\\r``, form feeds, ``\\u2028`` …) stay inside the line.

    >>> split_lines("A EQU 1\\r\\nB EQU a\\x0cb\\n")
    ['A EQU 1', 'B EQU a\\x0cb']
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
