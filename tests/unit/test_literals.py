#!/usr/bin/env python3
"""
Tests for constant literal decoding (integers with suffixes and radixes,
floats, characters and string escapes) and literal range errors.
"""

import math
import pytest
from sexp_message.frontend.parser import ParseError
from sexp_message.frontend.transformers.literals import LiteralParser
from sexp_message.shared import ConstantKind, ErrorCode, SexpMessageSourceError, SourceLocation

LOC = SourceLocation("lit.sxm", 1, 1)


class TestIntegerLiterals:
    @pytest.mark.parametrize("text,value,kind", [
        ("42", 42, ConstantKind.INT),
        ("1_000", 1000, ConstantKind.INT),
        ("0x2a", 42, ConstantKind.INT),
        ("0o17", 15, ConstantKind.INT),
        ("0b101", 5, ConstantKind.INT),
        ("7l", 7, ConstantKind.INT32),
        ("7L", 7, ConstantKind.INT64),
        ("7n", 7, ConstantKind.NATIVEINT),
    ])
    def test_decodes_value_and_kind(self, text, value, kind):
        const = LiteralParser.parse_integer(text, LOC)
        assert const.value == value
        assert const.kind is kind

    def test_hex_literal_wraps_into_negative_half(self):
        assert LiteralParser.parse_integer("0xffffffffl", LOC).value == -1

    def test_int32_upper_bound(self):
        assert LiteralParser.parse_integer("2147483647l", LOC).value == 2 ** 31 - 1
        with pytest.raises(SexpMessageSourceError) as exc_info:
            LiteralParser.parse_integer("2147483648l", LOC)
        assert exc_info.value.error_code == ErrorCode.LITERAL_OUT_OF_RANGE.value

    def test_out_of_range_literal_surfaces_as_parse_error(self, parser):
        with pytest.raises(ParseError) as exc_info:
            parser.parse("let x = 2147483648l;", "range.sxm")
        assert exc_info.value.error_code == ErrorCode.LITERAL_OUT_OF_RANGE.value
        assert exc_info.value.location.line == 1
        assert exc_info.value.location.column == 9

    def test_negative_literals(self):
        const = LiteralParser.parse_integer("2l", LOC, negative=True)
        assert (const.value, const.kind, const.literal) == (-2, ConstantKind.INT32, "-2l")
        assert LiteralParser.parse_integer("2147483648l", LOC, negative=True).value == -2 ** 31
        assert LiteralParser.parse_integer("0x1", LOC, negative=True).value == -1

    def test_literal_spelling_is_kept(self):
        assert LiteralParser.parse_integer("0x2a", LOC).literal == "0x2a"
        assert LiteralParser.parse_float("1e3", LOC).literal == "1e3"


class TestFloatLiterals:
    @pytest.mark.parametrize("text,value", [
        ("2.", 2.0),
        ("1.5", 1.5),
        ("1e3", 1000.0),
        ("1_0.2_5", 10.25),
    ])
    def test_decodes_value(self, text, value):
        const = LiteralParser.parse_float(text, LOC)
        assert const.kind is ConstantKind.FLOAT
        assert math.isclose(const.value, value)

    def test_parser_prefers_float_over_integer(self, parse_expr):
        assert parse_expr("2.").kind is ConstantKind.FLOAT


class TestCharAndStringLiterals:
    def test_simple_escapes(self):
        assert LiteralParser.parse_string(r'"a\n\t\"b\\"', LOC).value == 'a\n\t"b\\'

    def test_decimal_and_hex_escapes(self):
        assert LiteralParser.parse_string(r'"\065\x42"', LOC).value == "AB"

    def test_backslash_newline_skips_indentation(self):
        assert LiteralParser.parse_string('"ab\\\n    cd"', LOC).value == "abcd"

    def test_unknown_escape_is_kept(self):
        assert LiteralParser.parse_string(r'"\q"', LOC).value == "\\q"

    def test_decimal_escape_above_255_is_error(self):
        with pytest.raises(SexpMessageSourceError):
            LiteralParser.parse_string(r'"\300"', LOC)

    def test_char_literals(self, parse_expr):
        assert parse_expr("'a'").value == "a"
        assert parse_expr("'a'").kind is ConstantKind.CHAR
        assert parse_expr(r"'\n'").value == "\n"

    def test_empty_string(self, parse_expr):
        const = parse_expr('""')
        assert const.kind is ConstantKind.STRING
        assert const.is_empty_string()
