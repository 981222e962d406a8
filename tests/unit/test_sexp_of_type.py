#!/usr/bin/env python3
"""
Tests for the type-directed conversion resolver.
"""

import pytest
from sexp_message.frontend.printer import string_of_expression
from sexp_message.passes.sexp_of_type import converter_name, sexp_of_core_type
from sexp_message.shared import (
    ErrorCode, SexpMessageSourceError, Identifier, Constant, TypeConstructor, TupleType,
)


def _resolve_text(parse_expr, type_text):
    constraint = parse_expr(f"(x : {type_text})")
    return string_of_expression(sexp_of_core_type(constraint.type_expr))


class TestConverterName:
    @pytest.mark.parametrize("type_name,expected", [
        ("int", "sexp_of_int"),
        ("string", "sexp_of_string"),
        ("t", "sexp_of_t"),
        ("Uri.t", "Uri.sexp_of_t"),
        ("Core.Time.t", "Core.Time.sexp_of_t"),
        ("sexp_option", "sexp_of_option"),
        ("sexp_opaque", "sexp_of_opaque"),
    ])
    def test_names(self, type_name, expected):
        assert converter_name(type_name) == expected

    def test_aliases_apply_to_unqualified_names_only(self):
        assert converter_name("M.sexp_option") == "M.sexp_of_sexp_option"


class TestResolver:
    def test_simple_type(self, parse_expr):
        assert _resolve_text(parse_expr, "int") == "sexp_of_int"

    def test_parameterized_type(self, parse_expr):
        assert _resolve_text(parse_expr, "int list") == "sexp_of_list sexp_of_int"

    def test_nested_parameterized_type(self, parse_expr):
        assert _resolve_text(parse_expr, "string option list") == "sexp_of_list (sexp_of_option sexp_of_string)"

    def test_tuple_type(self, parse_expr):
        assert _resolve_text(parse_expr, "int * Uri.t") == "Conv.sexp_of_tuple [sexp_of_int; Uri.sexp_of_t]"

    def test_tuple_inside_list(self, parse_expr):
        assert _resolve_text(parse_expr, "(int * string) list") == (
            "sexp_of_list (Conv.sexp_of_tuple [sexp_of_int; sexp_of_string])"
        )

    def test_nested_sexp_option_converts_as_option(self, parse_expr):
        assert _resolve_text(parse_expr, "int sexp_option") == "sexp_of_option sexp_of_int"

    def test_one_component_tuple_is_rejected(self):
        with pytest.raises(SexpMessageSourceError) as exc_info:
            sexp_of_core_type(TupleType([TypeConstructor("int")]))
        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_TYPE.value

    @pytest.mark.parametrize("node", [Identifier("x"), Constant(1, None)])
    def test_non_type_nodes_are_rejected(self, node):
        with pytest.raises(SexpMessageSourceError) as exc_info:
            sexp_of_core_type(node)
        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_TYPE.value

    def test_result_keeps_type_location(self, parse_expr):
        constraint = parse_expr("(x : int)")
        assert sexp_of_core_type(constraint.type_expr).location == constraint.type_expr.location

    def test_opaque_ignores_its_argument(self, parse_expr):
        assert _resolve_text(parse_expr, "handle sexp_opaque") == "sexp_of_opaque"
