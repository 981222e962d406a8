"""
Runtime

Evaluates a compiled (expanded) program with optional named inputs.
"""

import logging
from typing import Optional, Dict, Any, TYPE_CHECKING

from ..shared import Expression, SexpMessageRuntimeError
from .environment import ExecutionEnvironment
from .evaluator import Evaluator

if TYPE_CHECKING:
    from ..compiler.driver import CompilationResult

logger = logging.getLogger("sexp_message.runtime.runtime")


class ExecutionResult:
    """
    Execution result: the program's value, its top-level bindings, or the
    error that stopped it.
    """
    def __init__(
        self,
        value: Optional[Any] = None,
        outputs: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None
    ):
        self.value = value
        self.outputs = outputs if outputs is not None else {}
        self.error = error

    @property
    def success(self) -> bool:
        """Whether execution succeeded (no error)"""
        return self.error is None

    @property
    def errors(self) -> list:
        if self.error:
            return [str(self.error)]
        return []


class SexpMessageRuntime:
    """
    Thin runtime layer.

    Fresh environment per execute: no state leaks between runs.
    """

    def execute(
        self,
        compilation_result: "CompilationResult",
        inputs: Optional[Dict[str, Any]] = None
    ) -> ExecutionResult:
        if not compilation_result.success or compilation_result.program is None:
            return ExecutionResult(error=SexpMessageRuntimeError("Compilation failed"))

        env = ExecutionEnvironment()
        for name, value in (inputs or {}).items():
            env.set_value(name, value)

        try:
            value = Evaluator(env).visit_program(compilation_result.program)
        except SexpMessageRuntimeError as e:
            logger.debug(f"Execution failed: {e.message}")
            return ExecutionResult(outputs=dict(env.global_scope()), error=e)
        outputs = {k: v for k, v in env.global_scope().items() if k not in (inputs or {})}
        return ExecutionResult(value=value, outputs=outputs)

    def execute_expression(self, expr: Expression, inputs: Optional[Dict[str, Any]] = None) -> Any:
        """Evaluate a single expression; raises SexpMessageRuntimeError on failure."""
        env = ExecutionEnvironment()
        for name, value in (inputs or {}).items():
            env.set_value(name, value)
        return expr.accept(Evaluator(env))
