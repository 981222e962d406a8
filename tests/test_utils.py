"""
Test utilities for the sexp_message test suite.

Compile-then-execute helpers and shorthand for comparing S-expression
values against nested Python lists.
"""

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from sexp_message.compiler.driver import CompilerDriver, CompilationResult
from sexp_message.runtime.runtime import SexpMessageRuntime
from sexp_message.runtime.sexp import is_sexp, sexp_to_python


@dataclass
class ExecutionResult:
    """Unified execution result for tests."""
    value: Any = None
    outputs: Dict[str, Any] = field(default_factory=dict)
    success: bool = False
    error: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    error_codes: List[str] = field(default_factory=list)

    @property
    def sexp(self) -> Any:
        """Value as nested lists of strings (atoms are plain strings)."""
        return sexp_to_python(self.value) if is_sexp(self.value) else self.value

    @property
    def text(self) -> str:
        return self.value.to_string()


def run_compiled(result: CompilationResult, runtime: SexpMessageRuntime,
                 inputs: Optional[Dict[str, Any]] = None) -> ExecutionResult:
    if not result.success:
        reporter = result.ctx.reporter if result.ctx else None
        return ExecutionResult(
            success=False,
            errors=[reporter.format_all_errors(color=False)] if reporter and reporter.has_errors() else [],
            error_codes=[e.code for e in reporter.errors] if reporter else [],
        )

    exec_result = runtime.execute(result, inputs=inputs or {})
    error_str = str(exec_result.error) if exec_result.error else None
    return ExecutionResult(
        value=exec_result.value,
        outputs=exec_result.outputs or {},
        success=exec_result.error is None,
        error=error_str,
        errors=[error_str] if error_str else [],
        error_codes=[getattr(exec_result.error, "error_code", None)] if exec_result.error else [],
    )


def compile_and_execute(source: str, inputs: Optional[Dict[str, Any]] = None,
                        source_file: str = "test.sxm") -> ExecutionResult:
    """Compile and run with fresh instances (for tests without fixtures)."""
    result = CompilerDriver().compile(source, source_file)
    return run_compiled(result, SexpMessageRuntime(), inputs)


def expand_to_text(source: str, source_file: str = "test.sxm") -> str:
    """Compile and print the expanded program (statements without the trailing newline)."""
    from sexp_message.frontend.printer import string_of_program
    result = CompilerDriver().compile(source, source_file)
    assert result.success, result.get_errors()
    return string_of_program(result.program)
