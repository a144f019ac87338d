"""
Core data models for the assembler front end.

Tokens are produced by the lexer, statements by the parser.  Every model is a
frozen dataclass: nothing is mutated once it has been built.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Tuple, Union

if TYPE_CHECKING:
    from .errors import ParseError


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenKind(Enum):
    """Closed set of lexical categories."""

    UNKNOWN = "Unknown"

    SPACE = "Space"
    TAB = "Tab"
    LINE_BREAK = "LineBreak"

    SLASH = "Slash"
    DOUBLE_QUOTE = "DoubleQuote"
    COMMA = "Comma"
    DOT = "Dot"
    SEMICOLON = "SemiColon"

    NUMBER = "Number"
    IDENTIFIER = "Identifier"

    END_OF_INPUT = "EndOfInput"


# Prefix that introduces a hexadecimal numeral; not part of the literal.
HEX_PREFIX = "$"

BLANK_KINDS = frozenset({TokenKind.SPACE, TokenKind.TAB})
WHITESPACE_KINDS = BLANK_KINDS | {TokenKind.LINE_BREAK}


@dataclass(frozen=True)
class Token:
    """A classified lexical unit."""

    literal: str
    kind: TokenKind

    @property
    def source(self) -> str:
        """The exact text this token was read from."""
        if self.kind is TokenKind.NUMBER:
            return HEX_PREFIX + self.literal
        return self.literal

    def is_keyword(self, keyword: str) -> bool:
        """True for an identifier spelling *keyword* in any letter case."""
        return (
            self.kind is TokenKind.IDENTIFIER
            and self.literal.lower() == keyword.lower()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "literal": self.literal}

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.literal!r})"


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


class StatementType(Enum):
    INCLUDE = "INCLUDE"
    SECTION = "SECTION"
    IF = "IF"
    NEW_CHARMAP = "NEWCHARMAP"
    SET_CHARMAP = "SETCHARMAP"
    CHARMAP = "CHARMAP"
    DEF = "DEF"


@dataclass(frozen=True)
class Include:
    """``INCLUDE "path"`` – the path is recorded, never opened."""

    path: str
    kind: StatementType = field(default=StatementType.INCLUDE, init=False)

    def render(self) -> str:
        return f'INCLUDE "{self.path}"'

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "path": self.path}


@dataclass(frozen=True)
class Section:
    """``SECTION "name", TYPE``"""

    name: str
    section_type: str
    kind: StatementType = field(default=StatementType.SECTION, init=False)

    def render(self) -> str:
        return f'SECTION "{self.name}", {self.section_type}'

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "name": self.name,
            "section_type": self.section_type,
        }


@dataclass(frozen=True)
class If:
    """Marker for a skipped ``IF`` … ``ENDC`` block."""

    kind: StatementType = field(default=StatementType.IF, init=False)

    def render(self) -> str:
        return "IF"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value}


@dataclass(frozen=True)
class NewCharMap:
    name: str
    kind: StatementType = field(default=StatementType.NEW_CHARMAP, init=False)

    def render(self) -> str:
        return f"NEWCHARMAP {self.name}"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "name": self.name}


@dataclass(frozen=True)
class SetCharMap:
    name: str
    kind: StatementType = field(default=StatementType.SET_CHARMAP, init=False)

    def render(self) -> str:
        return f"SETCHARMAP {self.name}"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "name": self.name}


@dataclass(frozen=True)
class CharMap:
    """``CHARMAP "value", $code`` – *code* is already converted from hex."""

    value: str
    code: int
    kind: StatementType = field(default=StatementType.CHARMAP, init=False)

    def render(self) -> str:
        return f'CHARMAP "{self.value}", ${self.code:02X}'

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "value": self.value, "code": self.code}


@dataclass(frozen=True)
class Def:
    """``NAME EQU value`` with the right-hand side kept as raw text."""

    name: str
    value: str
    kind: StatementType = field(default=StatementType.DEF, init=False)

    def render(self) -> str:
        return f"{self.name} EQU {self.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "name": self.name, "value": self.value}


Statement = Union[Include, Section, If, NewCharMap, SetCharMap, CharMap, Def]


# ---------------------------------------------------------------------------
# AST and parse result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ast:
    """Ordered, read-only list of statements in source order."""

    statements: Tuple[Statement, ...] = ()

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)

    def __getitem__(self, index: int) -> Statement:
        return self.statements[index]

    def render(self) -> str:
        lines = ["Ast", "Statements: ["]
        lines.extend(stmt.render() for stmt in self.statements)
        lines.append("]")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"statements": [s.to_dict() for s in self.statements]}


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of a full parse: every statement read before parsing stopped,
    plus the error that stopped it (``None`` when the input simply ran out).
    """

    ast: Ast
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data = self.ast.to_dict()
        data["error"] = self.error.message if self.error is not None else None
        return data
