"""
Literal Parser - Extracted from MessageTransformer
Decodes constant tokens (integers, floats, chars, strings) into Constant nodes
"""

import re

from ...shared import Constant, ConstantKind, SourceLocation, ErrorCode, SexpMessageSourceError
from ...shared.types import INTEGER_SUFFIXES, INTEGER_BOUNDS

_RADIX_PREFIXES = {"0x": 16, "0X": 16, "0o": 8, "0O": 8, "0b": 2, "0B": 2}

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "t": "\t",
    "b": "\b",
    "r": "\r",
    " ": " ",
}

_ESCAPE_RE = re.compile(r"\\(\n[ \t]*|[0-9]{3}|x[0-9a-fA-F]{2}|.)", re.DOTALL)


class LiteralParser:
    """Dedicated parser for constant tokens"""

    @staticmethod
    def parse_integer(text: str, location: SourceLocation, negative: bool = False) -> Constant:
        """Parse `42`, `0x2a`, `42l`, `42L`, `42n` with OCaml range checks"""
        kind = ConstantKind.INT
        digits = text
        if digits[-1] in INTEGER_SUFFIXES:
            kind = INTEGER_SUFFIXES[digits[-1]]
            digits = digits[:-1]
        digits = digits.replace("_", "")
        radix = _RADIX_PREFIXES.get(digits[:2], 10)
        value = int(digits[2:], radix) if radix != 10 else int(digits)
        if negative:
            value = -value

        low, high = INTEGER_BOUNDS[kind]
        # Non-decimal literals wrap around the kind's width like OCaml's lexer
        if radix != 10 and abs(value) <= 2 * high + 1:
            value = (value - low) % (2 * (high + 1)) + low
        if not low <= value <= high:
            raise SexpMessageSourceError(
                f"integer literal exceeds the range of representable integers of type {kind.value}",
                location,
                error_code=ErrorCode.LITERAL_OUT_OF_RANGE.value,
                category="syntax",
            )
        return Constant(value, kind, location, literal=("-" if negative else "") + text)

    @staticmethod
    def parse_float(text: str, location: SourceLocation, negative: bool = False) -> Constant:
        """Parse `1.5`, `2.`, `1e-3`"""
        value = float(text.replace("_", ""))
        if negative:
            value = -value
        return Constant(value, ConstantKind.FLOAT, location, literal=("-" if negative else "") + text)

    @staticmethod
    def parse_char(text: str, location: SourceLocation) -> Constant:
        """Parse a quoted character literal"""
        return Constant(_unescape(text[1:-1], location), ConstantKind.CHAR, location)

    @staticmethod
    def parse_string(text: str, location: SourceLocation) -> Constant:
        """Parse a quoted string literal"""
        return Constant(_unescape(text[1:-1], location), ConstantKind.STRING, location)


def _unescape(body: str, location: SourceLocation) -> str:
    """Decode OCaml escape sequences"""

    def replace(match: "re.Match") -> str:
        seq = match.group(1)
        if seq[0] == "\n":
            # Backslash-newline skips the line break and the next line's indentation
            return ""
        if seq in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[seq]
        if len(seq) == 3 and seq[0] == "x":
            return chr(int(seq[1:], 16))
        if len(seq) == 3 and seq.isdigit():
            code = int(seq)
            if code > 255:
                raise SexpMessageSourceError(
                    f"illegal escape sequence \\{seq}",
                    location,
                    error_code=ErrorCode.SYNTAX_ERROR.value,
                    category="syntax",
                )
            return chr(code)
        # Unknown escapes are kept verbatim, as OCaml does with a warning
        return "\\" + seq

    return _ESCAPE_RE.sub(replace, body)
