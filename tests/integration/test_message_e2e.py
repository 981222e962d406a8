"""
End-to-end tests for [%message]: compile, expand, evaluate, and compare the
resulting S-expression.

Covers:
- Call-site shapes (empty, single value, application with labels)
- Empty-string omission and the single-element collapse, static and at run time
- sexp_option arguments in every position
- Expression tags, nested messages, [%here] positions
- Type-directed conversion of lists, options, tuples and opaque values
"""

import pytest
from tests.test_utils import expand_to_text


class TestCallSiteShapes:
    """Shapes of the payload and what each one produces."""

    def test_empty_message(self, compile_and_execute):
        result = compile_and_execute("[%message];")
        assert result.success, result.errors
        assert result.text == "()"

    def test_single_constant(self, compile_and_execute):
        result = compile_and_execute("[%message 42];")
        assert result.success, result.errors
        assert result.text == "42"

    def test_application_with_labels(self, compile_and_execute):
        result = compile_and_execute('[%message f x ~y:1 ~z:"s"];', inputs={"f": "f", "x": "x"})
        assert result.success, result.errors
        assert result.sexp == ["f", "x", ["y", "1"], ["z", "s"]]
        assert result.text == "(f x (y 1) (z s))"

    def test_only_empty_strings(self, compile_and_execute):
        assert compile_and_execute('[%message ""];').text == "()"
        assert compile_and_execute('[%message "" ~x:""];').text == "()"

    def test_constants_of_every_kind(self, compile_and_execute):
        result = compile_and_execute("[%message 'c' ~i:1 ~l:5l ~big:5L ~n:5n ~f:2. ~g:2.5];")
        assert result.success, result.errors
        assert result.text == "(c (i 1) (l 5) (big 5) (n 5) (f 2) (g 2.5))"

    def test_negative_constants(self, compile_and_execute):
        assert compile_and_execute("[%message (-1)];").text == "-1"
        assert compile_and_execute('[%message "" ~x:(-2l)];').text == "(x -2)"
        assert compile_and_execute('[%message "" ~y:(-1.5)];').text == "(y -1.5)"
        assert expand_to_text("[%message (-1)];") == "Conv.sexp_of_int (-1);"

    def test_punned_label(self, compile_and_execute):
        result = compile_and_execute('[%message "request failed" ~url];', inputs={"url": "http://a/b"})
        assert result.text == '("request failed" (url http://a/b))'

    def test_untagged_label(self, compile_and_execute):
        result = compile_and_execute('[%message "count" ~_:(n : int)];', inputs={"n": 3})
        assert result.text == "(count 3)"


class TestExpressionTags:
    def test_constraint_tag_is_source_text(self, compile_and_execute):
        result = compile_and_execute("[%message (x + 1 : int)];", inputs={"x": 2})
        assert result.success, result.errors
        assert result.sexp == ["x + 1", "3"]
        assert result.text == '("x + 1" 3)'

    def test_string_expression_is_converted_as_string(self, compile_and_execute):
        result = compile_and_execute('[%message "user" (name ^ "!")];', inputs={"name": "bob"})
        assert result.text == "(user bob!)"

    @pytest.mark.parametrize("source,text", [
        ("[%message (1e3 : float)];", "(1e3 1000)"),
        ("[%message (2. : float)];", "(2. 2)"),
        ("[%message (0x10 : int)];", "(0x10 16)"),
    ])
    def test_numeric_tag_is_spelled_as_written(self, compile_and_execute, source, text):
        result = compile_and_execute(source)
        assert result.success, result.errors
        assert result.text == text

    def test_string_of_builtins(self, compile_and_execute):
        result = compile_and_execute("[%message (string_of_int n) ~f:(string_of_float x)];", inputs={"n": 3, "x": 2.0})
        assert result.success, result.errors
        assert result.text == "(3 (f 2.))"


class TestOptionalArguments:
    """sexp_option arguments contribute only when they hold a value."""

    @pytest.mark.parametrize("value,text", [(3, "(v 3)"), (None, "()")])
    def test_single_optional(self, compile_and_execute, value, text):
        result = compile_and_execute("[%message (v : int sexp_option)];", inputs={"v": value})
        assert result.success, result.errors
        assert result.text == text

    @pytest.mark.parametrize("value,text", [(1, "(a (v 1))"), (None, "a")])
    def test_collapse_at_run_time(self, compile_and_execute, value, text):
        result = compile_and_execute('[%message "a" (v : int sexp_option)];', inputs={"v": value})
        assert result.text == text

    @pytest.mark.parametrize("a,b,text", [
        (None, None, "()"),
        (1, None, "(a 1)"),
        (None, 2, "(b 2)"),
        (1, 2, "((a 1) (b 2))"),
    ])
    def test_two_optionals(self, compile_and_execute, a, b, text):
        result = compile_and_execute(
            "[%message (a : int sexp_option) (b : int sexp_option)];", inputs={"a": a, "b": b}
        )
        assert result.text == text

    def test_labelled_optional(self, compile_and_execute):
        source = '[%message "x" ~opt:(o : string sexp_option) "y"];'
        assert compile_and_execute(source, inputs={"o": "hi"}).text == "(x (opt hi) y)"
        assert compile_and_execute(source, inputs={"o": None}).text == "(x y)"

    def test_untagged_optional(self, compile_and_execute):
        source = '[%message "" ~_:(v : int sexp_option)];'
        assert compile_and_execute(source, inputs={"v": 5}).text == "5"
        assert compile_and_execute(source, inputs={"v": None}).text == "()"

    def test_optional_with_let_bound_value(self, compile_and_execute):
        source = "let v = Some 4;\nlet w = None;\n[%message (v : int sexp_option) (w : int sexp_option)];"
        assert compile_and_execute(source).text == "(v 4)"

    def test_option_of_list(self, compile_and_execute):
        result = compile_and_execute("[%message (xs : int list sexp_option)];", inputs={"xs": [1, 2]})
        assert result.text == "(xs (1 2))"


class TestNesting:
    def test_nested_message(self, compile_and_execute):
        result = compile_and_execute('[%message "outer" ~inner:([%message "a" "b"] : Sexp.t)];')
        assert result.success, result.errors
        assert result.sexp == ["outer", ["inner", ["a", "b"]]]

    def test_let_bound_messages(self, compile_and_execute):
        source = 'let m = [%message "a"];\nlet n = [%message "b" ~m:(m : Sexp.t)];\nn;'
        result = compile_and_execute(source)
        assert result.text == "(b (m a))"
        assert set(result.outputs) == {"m", "n"}

    def test_here_position(self, compile_and_execute):
        result = compile_and_execute('[%message "at" ~pos:[%here]];', source_file="test.sxm")
        assert result.text == "(at (pos test.sxm:1:20))"

    def test_standalone_here(self, compile_and_execute):
        result = compile_and_execute("[%here];", source_file="test.sxm")
        assert result.value == "test.sxm:1:0"

    def test_here_on_later_line(self, compile_and_execute):
        result = compile_and_execute('let a = 1;\n  [%message "at" [%here]];', source_file="p.sxm")
        assert result.text == "(at p.sxm:2:17)"


class TestTypeDirectedConversion:
    def test_list(self, compile_and_execute):
        assert compile_and_execute("[%message (xs : int list)];", inputs={"xs": [1, 2]}).text == "(xs (1 2))"

    def test_tuple(self, compile_and_execute):
        result = compile_and_execute("[%message (p : int * string)];", inputs={"p": [1, "a"]})
        assert result.text == "(p (1 a))"

    def test_list_of_options(self, compile_and_execute):
        result = compile_and_execute("[%message (xs : int option list)];", inputs={"xs": [1, None]})
        assert result.text == "(xs ((1) ()))"

    def test_opaque(self, compile_and_execute):
        result = compile_and_execute("[%message (h : handle sexp_opaque)];", inputs={"h": object()})
        assert result.text == "(h <opaque>)"

    def test_bool_and_unit(self, compile_and_execute):
        result = compile_and_execute("[%message (b : bool) (u : unit)];", inputs={"b": True, "u": ()})
        assert result.text == "((b true) (u ()))"


class TestExpandedText:
    def test_static_message(self):
        assert expand_to_text('[%message "a" ~x];') == (
            'Sexp.List [Conv.sexp_of_string "a"; Sexp.List [Sexp.Atom "x"; Conv.sexp_of_string x]];'
        )

    def test_optional_message(self):
        assert expand_to_text("[%message (v : int sexp_option)];") == (
            "match (match (v, []) with (None, tl) -> tl"
            " | (Some v, tl) -> Sexp.List [Sexp.Atom \"v\"; sexp_of_int v] :: tl)"
            " with [h] -> h | ([] | _ :: _ :: _) as res -> Sexp.List res;"
        )

    def test_non_message_code_is_kept(self):
        assert expand_to_text('let s = "a" ^ "b";\n[%message s];') == (
            'let s = "a" ^ "b";\nConv.sexp_of_string s;'
        )
