"""
Tests for the directive Parser.

Covers each directive grammar, comment skipping, keyword case handling,
the stop-on-first-error driving loop and the exact error messages.
"""
from __future__ import annotations

import logging
import textwrap

import pytest

from gbasm_parser.errors import (
    InvalidNumberError,
    MissingCommaError,
    MissingIdentifierError,
    MissingNumberError,
    MissingQuoteError,
    NoTokensLeft,
    UnsupportedTokenError,
)
from gbasm_parser.lexer.lexer import Lexer, lex_content
from gbasm_parser.models import (
    Ast,
    CharMap,
    Def,
    If,
    Include,
    NewCharMap,
    Section,
    SetCharMap,
    StatementType,
)
from gbasm_parser.parser.directive_parser import Parser, parse_ast


def _parse(source: str):
    return parse_ast(lex_content(textwrap.dedent(source).splitlines()))


def _statements(source: str) -> list:
    result = _parse(source)
    assert result.error is None, result.error
    return list(result.ast)


# ─────────────────────────────────────────────────────────────────────────────
# Individual directives
# ─────────────────────────────────────────────────────────────────────────────


class TestInclude:
    def test_path(self):
        assert _statements('INCLUDE "a/b.asm"') == [Include(path="a/b.asm")]

    def test_path_has_no_quotes(self):
        (stmt,) = _statements('INCLUDE "a/b.asm"')
        assert '"' not in stmt.path

    def test_lowercase_keyword(self):
        assert _statements('include "x.inc"') == [Include(path="x.inc")]

    def test_quote_on_next_line(self):
        assert _statements('INCLUDE\n  "x.inc"') == [Include(path="x.inc")]

    def test_spaces_inside_path_kept(self):
        assert _statements('INCLUDE "my file.asm"') == [Include(path="my file.asm")]

    def test_hex_inside_path_keeps_dollar(self):
        assert _statements('INCLUDE "bank$1.asm"') == [Include(path="bank$1.asm")]

    def test_missing_quote(self):
        result = _parse("INCLUDE foo")
        assert isinstance(result.error, MissingQuoteError)
        assert result.error.message == "missing quote after include"
        assert len(result.ast) == 0

    def test_missing_quote_at_end_of_input(self):
        result = _parse("INCLUDE")
        assert isinstance(result.error, MissingQuoteError)

    def test_unterminated_string_runs_to_end(self):
        result = _parse('INCLUDE "abc\nSECTION')
        assert result.error is None
        assert list(result.ast) == [Include(path="abc\nSECTION\n")]


class TestSection:
    def test_name_and_type(self):
        assert _statements('SECTION "ROM0", ROM0') == [
            Section(name="ROM0", section_type="ROM0")
        ]

    def test_no_space_after_comma(self):
        assert _statements('SECTION "Main",WRAM0') == [
            Section(name="Main", section_type="WRAM0")
        ]

    def test_type_taken_verbatim(self):
        (stmt,) = _statements('Section "vars", hram')
        assert stmt.section_type == "hram"

    def test_missing_quote(self):
        result = _parse("SECTION Main, ROM0")
        assert isinstance(result.error, MissingQuoteError)
        assert result.error.message == "missing quote after section"

    def test_missing_comma(self):
        result = _parse('SECTION "Main" ROM0')
        assert isinstance(result.error, MissingCommaError)
        assert result.error.message == "missing comma after section name"

    def test_missing_type(self):
        result = parse_ast(Lexer('SECTION "Main",'))
        assert isinstance(result.error, MissingIdentifierError)


class TestIf:
    def test_body_is_skipped(self):
        source = """\
            IF SOME_COND
                INCLUDE "never.asm"
                garbage ( ] $
            ENDC
            NEWCHARMAP After
        """
        assert _statements(source) == [If(), NewCharMap(name="After")]

    def test_endc_case_insensitive(self):
        assert _statements("if X\nendc") == [If()]

    def test_flat_scan_stops_at_first_endc(self):
        source = """\
            IF A
                IF B
                ENDC
            ENDC
        """
        result = _parse(source)
        # The outer ENDC is left over and is not a directive.
        assert list(result.ast) == [If()]
        assert isinstance(result.error, UnsupportedTokenError)

    def test_missing_endc_consumes_everything(self):
        result = _parse('IF X\nINCLUDE "a"')
        assert result.error is None
        assert list(result.ast) == [If()]

    def test_endc_prefix_is_not_endc(self):
        assert _statements("IF X\nENDCX\nENDC") == [If()]


class TestCharMaps:
    def test_newcharmap(self):
        assert _statements("NEWCHARMAP MyMap") == [NewCharMap(name="MyMap")]

    def test_newcharmap_missing_identifier(self):
        result = _parse('NEWCHARMAP "x"')
        assert isinstance(result.error, MissingIdentifierError)
        assert result.error.message == "no identifier after newcharmap"

    def test_newcharmap_at_end_of_input(self):
        result = _parse("NEWCHARMAP")
        assert isinstance(result.error, MissingIdentifierError)

    def test_setcharmap(self):
        assert _statements("SETCHARMAP MyMap") == [SetCharMap(name="MyMap")]

    def test_setcharmap_missing_identifier(self):
        result = _parse("SETCHARMAP ;")
        assert result.error.message == "no identifier after setcharmap"

    def test_charmap(self):
        assert _statements('CHARMAP "A", $41') == [CharMap(value="A", code=65)]

    def test_charmap_multi_character_value(self):
        assert _statements('CHARMAP "<END>", $ff') == [
            CharMap(value="<END>", code=255)
        ]

    def test_charmap_missing_quote(self):
        result = _parse("CHARMAP A, $41")
        assert isinstance(result.error, MissingQuoteError)
        assert result.error.message == "missing quote after charmap"

    def test_charmap_missing_comma(self):
        result = _parse('CHARMAP "A" $41')
        assert isinstance(result.error, MissingCommaError)
        assert result.error.message == "missing comma after charmap value"

    def test_charmap_missing_number(self):
        result = _parse('CHARMAP "A", 41')
        assert isinstance(result.error, MissingNumberError)
        assert result.error.message == "missing number after charmap value"

    def test_charmap_empty_numeral(self):
        result = _parse('CHARMAP "A", $')
        assert isinstance(result.error, InvalidNumberError)
        assert result.error.message == "invalid hexadecimal number in charmap"


class TestDef:
    def test_raw_value(self):
        assert _statements("FOO EQU 1+2") == [Def(name="FOO", value="1+2")]

    def test_lowercase_equ(self):
        assert _statements("foo equ 3") == [Def(name="foo", value="3")]

    def test_tabs_around_equ(self):
        assert _statements("FOO\tEQU\t$10") == [Def(name="FOO", value="$10")]

    def test_value_stops_at_line_break(self):
        assert _statements("A EQU 1\nB EQU 2") == [
            Def(name="A", value="1"),
            Def(name="B", value="2"),
        ]

    def test_value_kept_verbatim(self):
        (stmt,) = _statements("MASK EQU (1 << 3) | FLAG_A")
        assert stmt.value == "(1 << 3) | FLAG_A"

    def test_empty_value(self):
        assert _statements("FOO EQU") == [Def(name="FOO", value="")]

    def test_def_keyword_form(self):
        assert _statements("DEF FOO EQU 4") == [Def(name="FOO", value="4")]

    def test_def_keyword_without_name(self):
        result = _parse("DEF $1")
        assert isinstance(result.error, MissingIdentifierError)

    def test_symbol_named_def(self):
        assert _statements("def EQU 5") == [Def(name="def", value="5")]

    def test_symbol_named_def_with_tab(self):
        assert _statements("DEF\tequ $10") == [Def(name="DEF", value="$10")]

    def test_bare_identifier_is_unsupported(self):
        result = _parse("ld\n")
        assert isinstance(result.error, UnsupportedTokenError)
        assert result.error.message == "unsupported token found"

    def test_identifier_without_equ_is_unsupported(self):
        result = _parse("ld a, b")
        assert isinstance(result.error, UnsupportedTokenError)


# ─────────────────────────────────────────────────────────────────────────────
# Comments and the driving loop
# ─────────────────────────────────────────────────────────────────────────────


class TestComments:
    def test_comment_only(self):
        assert _statements("; nothing here") == []

    def test_comment_does_not_disturb_next_line(self):
        source = """\
            ; INCLUDE "not really"
            NEWCHARMAP Main
        """
        assert _statements(source) == [NewCharMap(name="Main")]

    def test_indented_comment(self):
        assert _statements('   ; note\nINCLUDE "x"') == [Include(path="x")]

    def test_comment_at_end_without_line_break(self):
        assert list(parse_ast(Lexer('INCLUDE "x"\n; end')).ast) == [Include(path="x")]


class TestDrivingLoop:
    def test_empty_input(self):
        result = _parse("")
        assert result.ok
        assert len(result.ast) == 0

    def test_whitespace_only_input(self):
        assert parse_ast(Lexer(" \t\n\n")).ok

    def test_order_preserved(self):
        source = """\
            SECTION "Vars", WRAM0
            COUNT EQU 3
            INCLUDE "x.asm"
        """
        kinds = [s.kind for s in _statements(source)]
        assert kinds == [StatementType.SECTION, StatementType.DEF, StatementType.INCLUDE]

    def test_stops_on_first_error_keeping_earlier_statements(self):
        source = """\
            NEWCHARMAP One
            INCLUDE foo
            NEWCHARMAP Two
        """
        result = _parse(source)
        assert not result.ok
        assert result.error.message == "missing quote after include"
        assert list(result.ast) == [NewCharMap(name="One")]

    @pytest.mark.parametrize("source", ['"x"', ",", ".", "/", "$10", "+"])
    def test_non_identifier_start_is_unsupported(self, source):
        result = _parse(source)
        assert isinstance(result.error, UnsupportedTokenError)

    def test_accepts_lazy_lexer(self):
        result = parse_ast(Lexer('CHARMAP "A", $41\n'))
        assert list(result.ast) == [CharMap(value="A", code=65)]

    def test_ast_is_read_only(self):
        result = _parse("NEWCHARMAP X")
        assert isinstance(result.ast, Ast)
        assert isinstance(result.ast.statements, tuple)


class TestDebugLogging:
    def test_statements_not_formatted_when_debug_is_off(self, monkeypatch, caplog):
        def _fail(self):
            raise AssertionError("formatted without DEBUG enabled")

        monkeypatch.setattr(Include, "render", _fail)
        monkeypatch.setattr(Include, "__repr__", _fail)
        with caplog.at_level(logging.INFO, logger="gbasm_parser"):
            result = _parse('INCLUDE "x.asm"')
        assert result.ok
        assert len(result.ast) == 1

    def test_statements_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gbasm_parser"):
            _parse("NEWCHARMAP Main")
        assert "NewCharMap(name='Main'" in caplog.text


class TestParserObject:
    def test_next_statement_raises_no_tokens_left(self):
        parser = Parser(lex_content(["; only a comment"]))
        with pytest.raises(NoTokensLeft) as exc_info:
            parser.next_statement()
        assert exc_info.value.message == "no tokens left"

    def test_statements_generator(self):
        parser = Parser(lex_content(["NEWCHARMAP A", "SETCHARMAP A"]))
        assert list(parser.statements()) == [NewCharMap(name="A"), SetCharMap(name="A")]

    def test_statements_generator_propagates_errors(self):
        parser = Parser(lex_content(["NEWCHARMAP A", "CHARMAP"]))
        gen = parser.statements()
        assert next(gen) == NewCharMap(name="A")
        with pytest.raises(MissingQuoteError):
            next(gen)
