"""
Runtime: S-expression values, converters and the evaluator of expanded code.
"""

from .sexp import Atom, SexpList, Sexp, is_sexp, sexp_to_python
from .conv import SexpConversionError
from .environment import ExecutionEnvironment, builtin_bindings
from .evaluator import Evaluator, PatternMatcher, evaluate
from .runtime import SexpMessageRuntime, ExecutionResult
