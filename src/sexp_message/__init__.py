"""
sexp_message: `[%message ...]` expansion for a small OCaml-flavoured
message language, with the runtime that evaluates the expanded code.
"""

from .compiler.driver import CompilerDriver, CompilationResult
from .runtime.runtime import SexpMessageRuntime, ExecutionResult
from .runtime.sexp import Atom, SexpList

__version__ = "0.1.0"

__all__ = [
    "CompilerDriver",
    "CompilationResult",
    "SexpMessageRuntime",
    "ExecutionResult",
    "Atom",
    "SexpList",
]
