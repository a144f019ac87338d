"""
gbasm_parser
============

Front end for a line-oriented Game Boy assembler dialect: a character-level
lexer and a recursive-descent parser that turn source text into an ordered
list of directive statements (``INCLUDE``, ``SECTION``, ``IF``/``ENDC``,
``NEWCHARMAP``, ``SETCHARMAP``, ``CHARMAP`` and ``NAME EQU value``).

Nothing is evaluated: includes are not followed, ``EQU`` values stay raw text
and ``IF`` bodies are skipped.

Quick start
-----------
>>> from gbasm_parser import SourceAnalysis
>>> result = SourceAnalysis().parse_text('CHARMAP "A", $41')
>>> result.ast[0]
CharMap(value='A', code=65, kind=<StatementType.CHARMAP: 'CHARMAP'>)
>>> result.ok
True
"""

from .errors import LexerExhausted, ParseError
from .lexer.lexer import Lexer, lex_content
from .models import (
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
    StatementType,
    Token,
    TokenKind,
)
from .parser.directive_parser import Parser, parse_ast
from .pipeline.source_analysis import SourceAnalysis

__version__ = "0.1.0"
__all__ = [
    "Ast",
    "CharMap",
    "Def",
    "If",
    "Include",
    "Lexer",
    "LexerExhausted",
    "NewCharMap",
    "ParseError",
    "ParseResult",
    "Parser",
    "Section",
    "SetCharMap",
    "SourceAnalysis",
    "Statement",
    "StatementType",
    "Token",
    "TokenKind",
    "lex_content",
    "parse_ast",
]
