"""
Compiler Driver

Rust Pattern: rustc_driver::driver
"""

import os
import logging
from typing import Optional
from pathlib import Path

from ..passes.base import ExpansionContext, PassManager, TransformationRegistry, default_registry
from ..passes.extension_expansion import ExtensionExpansionPass
from ..shared.nodes import Program
from ..shared.errors import SexpMessageSourceError
from ..frontend.parser import Parser, ParseError
from ..utils.config import DEFAULT_SOURCE_FILE, DUMP_AST_ENV_VAR, DUMP_AST_DIR
from ..utils.io_utils import read_source_file, write_text_file

logger = logging.getLogger("sexp_message.compiler.driver")


class CompilationResult:
    """Compilation result"""
    def __init__(
        self,
        program: Optional[Program] = None,
        ctx: Optional[ExpansionContext] = None,
        success: bool = False,
        parsed: Optional[Program] = None,
    ):
        self.program = program
        self.ctx = ctx
        self.success = success
        self.parsed = parsed

    def has_errors(self) -> bool:
        """True if compilation reported errors."""
        if self.ctx and self.ctx.reporter:
            return self.ctx.reporter.has_errors()
        return not self.success

    def get_errors(self) -> list:
        if self.ctx and self.ctx.reporter.has_errors():
            return [self.ctx.reporter.format_all_errors(color=False)]
        return []


class CompilerDriver:
    """
    Compiler driver (Rust naming: rustc_driver::driver).

    Phases:
    1. Parsing (source -> AST)
    2. Extension expansion ([%message], [%here])

    Each driver owns its registry; nothing is shared between drivers.
    """

    def __init__(self, registry: Optional[TransformationRegistry] = None):
        self.parser = Parser()
        self.registry = registry if registry is not None else default_registry()
        self.pass_manager = PassManager()
        self._register_passes()

    def _register_passes(self) -> None:
        self.pass_manager.register_pass(ExtensionExpansionPass)

    def _new_context(self, source_files: dict) -> ExpansionContext:
        return ExpansionContext(registry=self.registry, source_files=source_files)

    def compile(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> CompilationResult:
        """
        Compile source code.

        Rust Pattern: rustc_driver::driver::compile_input()

        A failed compilation carries no program: expansion errors are only
        reported, never emitted as partially expanded output.
        """
        ctx = self._new_context({source_file: source})
        try:
            parsed = self.parser.parse(source, source_file)
        except ParseError as e:
            ctx.reporter.report_exception(e)
            return CompilationResult(success=False, ctx=ctx)

        try:
            program = self.pass_manager.run_all(parsed, ctx)
        except SexpMessageSourceError as e:
            ctx.reporter.report_exception(e)
            return CompilationResult(success=False, ctx=ctx, parsed=parsed)

        if ctx.reporter.has_errors():
            logger.debug(f"{source_file}: {len(ctx.reporter.errors)} error(s)")
            return CompilationResult(success=False, ctx=ctx, parsed=parsed)

        if os.environ.get(DUMP_AST_ENV_VAR):
            self._dump_ast(program, source_file)
        return CompilationResult(program=program, ctx=ctx, success=True, parsed=parsed)

    def compile_file(self, path: Path) -> CompilationResult:
        path = Path(path)
        return self.compile(read_source_file(path), str(path))

    def _dump_ast(self, program: Program, source_file: str) -> None:
        from ..shared.serialization import serialize_ast
        out_path = Path(DUMP_AST_DIR) / (Path(source_file).stem + ".sexpr")
        write_text_file(out_path, serialize_ast(program) + "\n")
        logger.debug(f"Dumped expanded AST to {out_path}")
