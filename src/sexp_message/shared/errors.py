"""
Error Reporting

Rust Pattern: rustc_errors::Diagnostic

Every diagnostic raised while parsing, expanding or evaluating a message
program carries the SourceLocation of the offending syntax fragment.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Dict
from .source_location import SourceLocation


class ErrorCode(Enum):
    """Stable diagnostic codes, grouped by phase."""
    SYNTAX_ERROR = "E0001"
    LITERAL_OUT_OF_RANGE = "E0002"
    UNSUPPORTED_LITERAL_KIND = "E0101"
    OPTIONAL_LABEL_NOT_ALLOWED = "E0102"
    INVALID_PAYLOAD = "E0103"
    UNKNOWN_EXTENSION = "E0104"
    UNSUPPORTED_TYPE = "E0105"
    UNBOUND_NAME = "E0201"
    CONVERSION_ERROR = "E0202"
    MATCH_FAILURE = "E0203"
    UNEXPANDED_EXTENSION = "E0204"
    INTERNAL_ERROR = "E9999"


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("SEXP_MESSAGE_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


@dataclass
class Error:
    """
    Compile-time or runtime diagnostic.

    Rust Pattern: rustc_errors::Diagnostic
    """
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0102]: optional argument not allowed here
         --> main.sxm:1:21
          |
        1 | [%message "oops" ?x:1];
          |                     ^ `?x` is optional
          |
          = help: use a labelled argument `~x:` instead
    """
    out: List[str] = []

    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    loc = error.location
    if loc is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    source = source_files.get(loc.file)
    if source is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + str(loc))
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n")
    gw = max(len(str(loc.line)), 1)
    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))

    idx = loc.line - 1
    code_line = src_lines[idx] if 0 <= idx < len(src_lines) else ""
    out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)

    col_start = max(loc.column, 1) - 1
    if loc.end_line == loc.line and loc.end_column > loc.column:
        span_len = loc.end_column - loc.column
    else:
        span_len = _guess_span(code_line, col_start)
    carets = " " * col_start + "^" * max(1, span_len)
    label_suffix = f" {error.label}" if error.label else ""
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, _RED, color=color)
    )

    _append_annotations(out, error, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when the end column is unavailable or spans lines."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ";", ")", "]"):
            break
        length += 1
    return max(1, length)


def _append_annotations(out: List[str], error: Error, gw: int, color: bool) -> None:
    if not (error.help or error.note):
        return
    pad = " " * (gw + 1)
    out.append(_style(pad + "|", _BOLD, _BLUE, color=color))
    if error.help:
        out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + _style("help: ", _BOLD, color=color) + error.help)
    if error.note:
        out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + _style("note: ", _BOLD, color=color) + error.note)


def _summary(count: int, color: bool) -> str:
    summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
    return _style("error", _BOLD, _RED, color=color) + _style(f": {summary}", _BOLD, color=color)


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Error reporter with Rust-style formatting.

    Rust Pattern: rustc_errors::Emitter
    """

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            location=location,
            code=code,
            help=help,
            note=note,
            label=label,
        ))

    def report_exception(self, exc: "SexpMessageSourceError") -> None:
        """Record a raised source error without losing its code or annotations."""
        self.report_error(
            exc.message,
            exc.location,
            code=exc.error_code,
            help=exc.help_text,
            note=exc.note_text,
            label=exc.label_text,
        )

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        parts.append(_summary(len(self.errors), use_color))
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        if self.errors:
            print(self.format_all_errors(), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class SexpMessageError(Exception):
    """Base exception for all sexp_message errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"error: {self.message}\n --> {self.location}"
        return self.message


class SexpMessageSourceError(SexpMessageError):
    """
    Error in user source code with rich Rust-style formatting.

    Raised for any problem located in a message program: syntax errors,
    malformed extension payloads, invalid argument labels. Each one aborts
    only the expansion (or evaluation) it occurred in.
    """
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: str = ErrorCode.SYNTAX_ERROR.value,
                 category: str = "expansion",
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.category = category
        self.source_code = source_code
        self.help_text = help
        self.note_text = note
        self.label_text = label

    def __str__(self):
        source_files: Dict[str, str] = {}
        if self.source_code and self.location:
            source_files[self.location.file] = self.source_code
        err = Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            note=self.note_text,
            label=self.label_text,
        )
        return _format_diagnostic(err, source_files, color=_use_color())


class SexpMessageRuntimeError(SexpMessageSourceError):
    """Failure while evaluating generated code (unbound name, bad conversion, ...)."""
    def __init__(self, message: str, location: Optional[SourceLocation] = None,
                 error_code: str = ErrorCode.CONVERSION_ERROR.value, **kwargs):
        super().__init__(message, location, error_code=error_code, category="runtime", **kwargs)


class SexpMessageImplementationError(Exception):
    """
    Error in the Python implementation, never in user code.

    Use SexpMessageSourceError for anything the user can fix.
    """
    def __init__(self, message: str, error_code: str = ErrorCode.INTERNAL_ERROR.value):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
