#!/usr/bin/env python3
"""
Tests for diagnostics: the rustc-style reporter, error codes raised by
each phase, and the compiler's error collection across sites.
"""

import re
import pytest
from tests.test_utils import compile_and_execute
from sexp_message.shared.errors import (
    ErrorCode,
    Error,
    ErrorReporter,
    SexpMessageError,
    SexpMessageSourceError,
    SexpMessageRuntimeError,
    SexpMessageImplementationError,
)
from sexp_message.shared.source_location import SourceLocation

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


class TestErrorReporterFormatting:
    """Edge cases for the error reporter formatter."""

    def test_location_none(self):
        err = Error(message="something failed", location=None, code="E0001")
        out = ErrorReporter({}).format_error(err, color=False)
        assert "error[E0001]" in out
        assert "something failed" in out
        assert "unknown location" in out

    def test_file_not_in_source_files(self):
        loc = SourceLocation(file="missing.sxm", line=1, column=1)
        err = Error(message="oops", location=loc, code="E0104")
        out = ErrorReporter({}).format_error(err, color=False)
        assert "error[E0104]" in out
        assert "missing.sxm:1:1" in out

    def test_line_beyond_source(self):
        loc = SourceLocation(file="x.sxm", line=10, column=1)
        err = Error(message="bad", location=loc)
        out = ErrorReporter({"x.sxm": "let a = 1;\nlet b = 2;\n"}).format_error(err, color=False)
        assert " --> x.sxm:10:1" in out

    def test_caret_under_token_with_label_and_help(self):
        source = '[%message "oops" ?x:1];'
        loc = SourceLocation(file="main.sxm", line=1, column=21)
        err = Error(
            message="optional argument not allowed here",
            location=loc,
            code=ErrorCode.OPTIONAL_LABEL_NOT_ALLOWED.value,
            label="`?x` is optional",
            help="use a labelled argument `~x:` instead",
        )
        out = ErrorReporter({"main.sxm": source}).format_error(err, color=False)
        lines = out.split("\n")
        assert lines[0] == "error[E0102]: optional argument not allowed here"
        assert "1 | " + source in out
        caret_line = next(line for line in lines if "^" in line)
        assert caret_line.index("^") - caret_line.index("|") - 2 == 20
        assert "`?x` is optional" in caret_line
        assert "= help: use a labelled argument `~x:` instead" in out

    def test_span_width_from_end_column(self):
        source = "let x = foo;"
        loc = SourceLocation(file="s.sxm", line=1, column=9, end_line=1, end_column=12)
        out = ErrorReporter({"s.sxm": source}).format_error(Error("bad", loc), color=False)
        assert "^^^" in out
        assert "^^^^" not in out

    def test_summary_counts_errors(self):
        reporter = ErrorReporter({})
        reporter.report_error("one", None, code="E0104")
        reporter.report_error("two", None, code="E0104")
        out = reporter.format_all_errors(color=False)
        assert out.endswith("error: aborting due to 2 previous errors")

    def test_color_output_contains_ansi(self):
        reporter = ErrorReporter({})
        reporter.report_error("boom", None, code="E0001")
        out = reporter.format_all_errors(color=True)
        assert "\x1b[" in out
        assert "error[E0001]: boom" in _strip_ansi(out)

    def test_report_exception_keeps_code_and_annotations(self):
        reporter = ErrorReporter({})
        reporter.report_exception(SexpMessageSourceError(
            "bad payload", None, error_code=ErrorCode.INVALID_PAYLOAD.value, help="write [%here]",
        ))
        (err,) = reporter.errors
        assert err.code == "E0103"
        assert err.help == "write [%here]"


class TestExceptionClasses:
    def test_base_error_str(self):
        loc = SourceLocation("a.sxm", 2, 3)
        assert str(SexpMessageError("plain")) == "plain"
        assert "a.sxm:2:3" in str(SexpMessageError("located", loc))

    def test_source_error_renders_snippet(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        loc = SourceLocation("a.sxm", 1, 5)
        err = SexpMessageSourceError("bad", loc, source_code="let y = 1;")
        text = str(err)
        assert "error[E0001]: bad" in text
        assert "1 | let y = 1;" in text

    def test_runtime_error_defaults(self):
        err = SexpMessageRuntimeError("no")
        assert err.error_code == ErrorCode.CONVERSION_ERROR.value
        assert err.category == "runtime"

    def test_implementation_error(self):
        assert str(SexpMessageImplementationError("oops")) == "[E9999] oops"


class TestCompileErrors:
    @pytest.mark.parametrize("source,code", [
        ("let x = ;", ErrorCode.SYNTAX_ERROR),
        ("let x = 2147483648l;", ErrorCode.LITERAL_OUT_OF_RANGE),
        ('[%message "a" ?x:1];', ErrorCode.OPTIONAL_LABEL_NOT_ALLOWED),
        ("[%here 1];", ErrorCode.INVALID_PAYLOAD),
        ("[%foo 1];", ErrorCode.UNKNOWN_EXTENSION),
    ])
    def test_error_code(self, source, code):
        result = compile_and_execute(source)
        assert not result.success
        assert result.error_codes == [code.value]

    def test_every_failing_site_is_reported(self):
        source = '[%message "a" ?x:1];\n[%message "b"];\n[%message "c" ?y:2];'
        result = compile_and_execute(source)
        assert not result.success
        assert result.error_codes == ["E0102", "E0102"]
        assert "aborting due to 2 previous errors" in result.errors[0]

    def test_failed_compilation_has_no_program(self, compiler):
        result = compiler.compile("[%foo];", "f.sxm")
        assert result.program is None
        assert result.has_errors()
        assert "uninterpreted extension 'foo'" in result.get_errors()[0]


class TestRuntimeErrors:
    def test_unbound_name(self):
        result = compile_and_execute("[%message (missing : int)];")
        assert not result.success
        assert result.error_codes == [ErrorCode.UNBOUND_NAME.value]

    def test_wrong_type_for_converter(self):
        result = compile_and_execute("[%message (x : int)];", inputs={"x": "not an int"})
        assert not result.success
        assert result.error_codes == [ErrorCode.CONVERSION_ERROR.value]

    def test_string_fallback_requires_strings(self):
        result = compile_and_execute("[%message x];", inputs={"x": 3})
        assert result.error_codes == [ErrorCode.CONVERSION_ERROR.value]
