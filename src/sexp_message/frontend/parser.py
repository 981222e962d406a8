"""
Parser

Rust Pattern: rustc_parse
"""

from typing import Optional
from pathlib import Path
from lark import Lark
from lark.exceptions import (
    UnexpectedInput, UnexpectedToken, UnexpectedCharacters, UnexpectedEOF,
    ParseError as LarkParseError, VisitError,
)
import logging

from ..shared.nodes import Program
from ..shared.errors import SexpMessageSourceError, ErrorCode
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_FILE
from .transformers.base import MessageTransformer

logger = logging.getLogger("sexp_message.frontend.parser")


class ParseError(SexpMessageSourceError):
    """Syntax error with source location"""
    def __init__(self, message: str, source_file: str, location: Optional[SourceLocation] = None,
                 error_code: str = ErrorCode.SYNTAX_ERROR.value, source_code: Optional[str] = None,
                 help: Optional[str] = None):
        super().__init__(message, location, error_code=error_code, category="syntax",
                         source_code=source_code, help=help)
        self.source_file = source_file


class Parser:
    """
    Parser (Rust naming: rustc_parse).

    Takes source text, returns a Program whose nodes all carry locations.
    The LALR table is cached on disk by Lark.
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            start='program',
            parser='lalr',              # Required for caching
            cache=cache_file,
            propagate_positions=True,
            maybe_placeholders=False,
        )
        self.transformer = MessageTransformer()

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> Program:
        """
        Parse source code to AST.

        Raises ParseError for malformed input and for out-of-range literals.
        """
        self.transformer.current_file = source_file
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise ParseError(
                _describe_unexpected(e),
                source_file,
                SourceLocation(file=source_file, line=e.line, column=e.column),
                source_code=source,
            ) from e
        except LarkParseError as e:
            raise ParseError(f"Parse error: {e}", source_file, source_code=source) from e

        try:
            program = self.transformer.transform(tree)
        except VisitError as e:
            # Lark wraps transformer callback failures; surface literal errors unchanged
            orig = e.orig_exc
            if isinstance(orig, SexpMessageSourceError):
                raise ParseError(
                    orig.message, source_file, orig.location,
                    error_code=orig.error_code, source_code=source,
                ) from orig
            raise
        logger.debug(f"Parsed {source_file}: {len(program.statements)} statement(s)")
        return program

    def parse_expression(self, source: str, source_file: str = DEFAULT_SOURCE_FILE):
        """Parse a single expression (no trailing semicolon needed)."""
        text = source.rstrip()
        if not text.endswith(";"):
            text += ";"
        program = self.parse(text, source_file)
        if len(program.statements) != 1 or not hasattr(program.statements[0], "expr"):
            raise ParseError("expected a single expression", source_file, program.location, source_code=source)
        return program.statements[0].expr


def _describe_unexpected(e: UnexpectedInput) -> str:
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character {e.char!r}"
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"
    if isinstance(e, UnexpectedToken):
        if e.token.type == "$END":
            return "unexpected end of input"
        return f"unexpected token {str(e.token)!r}"
    return "syntax error"
