#!/usr/bin/env python3
"""
Tests for the S-expression AST dump.
"""

import sexpdata
from sexp_message.shared import Constant, ConstantKind, Identifier
from sexp_message.shared.serialization import ASTSerializer, serialize_ast


class TestSerializeAst:
    def test_constant(self):
        assert serialize_ast(Constant(42, ConstantKind.INT)) == "(constant int 42)"

    def test_string_values_are_quoted(self):
        assert serialize_ast(Constant.string("a b")) == '(constant string "a b")'
        assert serialize_ast(Identifier("x")) == '(ident "x")'

    def test_program_with_labels(self, parser):
        program = parser.parse('let m = f x ~y:1;', "s.sxm")
        assert serialize_ast(program) == '(program (let "m" (apply (ident "f") (ident "x") (~y (constant int 1)))))'

    def test_expanded_program_contains_match(self, compiler):
        result = compiler.compile("[%message (v : int sexp_option)];", "s.sxm")
        text = serialize_ast(result.program)
        assert "(match" in text
        assert "(alias-pattern" in text
        assert "(list-pattern)" in text

    def test_long_forms_are_broken_across_lines(self, compiler):
        result = compiler.compile('[%message "first" ~a:"x" ~b:"y" ~c:"z" ~d:"w"];', "s.sxm")
        text = serialize_ast(result.program)
        assert "\n" in text
        assert text.startswith("(program\n")

    def test_compact_output_reads_back(self, parser):
        program = parser.parse("[%message 1];", "s.sxm")
        compact = serialize_ast(program, pretty=False)
        assert "\n" not in compact
        assert sexpdata.loads(compact)[0] == sexpdata.Symbol("program")

    def test_locations(self, parser):
        program = parser.parse("x;", "loc.sxm")
        text = serialize_ast(program.statements[0].expr, include_location=True)
        assert text == '(ident "x" :loc ("loc.sxm" 1 1))'

    def test_unknown_node_placeholder(self):
        class Odd:
            pass
        assert ASTSerializer().serialize_to_sexpr(Odd()) == [sexpdata.Symbol("Odd"), sexpdata.Symbol("...")]
