"""
Lexer and parser exceptions.

The lexer has a single termination signal, :class:`LexerExhausted`.  Parse
failures share the :class:`ParseError` base; each carries a fixed,
human-readable ``message`` and no source position.
"""
from __future__ import annotations


class LexerExhausted(Exception):
    """Raised by the lexer once there are no characters left to read."""


class ParseError(Exception):
    """Base class for every directive-level parse failure."""

    default_message = "parse error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingQuoteError(ParseError):
    default_message = "missing quote"


class MissingCommaError(ParseError):
    default_message = "missing comma"


class MissingIdentifierError(ParseError):
    default_message = "missing identifier"


class MissingNumberError(ParseError):
    default_message = "missing number"


class InvalidNumberError(ParseError):
    default_message = "invalid hexadecimal number"


class UnsupportedTokenError(ParseError):
    default_message = "unsupported token found"


class NoTokensLeft(ParseError):
    """Input ran out between statements; ends a parse without failing it."""

    default_message = "no tokens left"
