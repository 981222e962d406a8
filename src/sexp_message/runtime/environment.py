"""
Execution Environment

Single scope stack for all variables, keyed by name. Top-level `let`
bindings and program inputs live in the global scope; match arms push a
scope for the variables their pattern binds.
"""

from typing import Dict, List, Any, Iterator
from contextlib import contextmanager

from . import conv
from ..utils.config import (
    CONV_MODULE, SEXP_OF_PREFIX, SEXP_ATOM_CONSTRUCTOR, SEXP_LIST_CONSTRUCTOR,
    NONE_CONSTRUCTOR, SOME_CONSTRUCTOR,
)


def _some(value: Any) -> Any:
    return value


def _string_of_float(value: Any) -> str:
    """`string_of_float`: twelve significant digits, always spelled as a float."""
    conv.sexp_of_float(value)
    text = "%.12g" % value
    if all(ch in "-0123456789" for ch in text):
        text += "."
    return text


def builtin_bindings() -> Dict[str, Any]:
    """Names generated code and message programs may refer to without binding them."""
    bindings: Dict[str, Any] = {
        SEXP_ATOM_CONSTRUCTOR: conv.sexp_atom,
        SEXP_LIST_CONSTRUCTOR: conv.sexp_list,
        "Sexp.sexp_of_t": conv.sexp_of_sexp,
        NONE_CONSTRUCTOR: None,
        SOME_CONSTRUCTOR: _some,
        "true": True,
        "false": False,
        "string_of_int": lambda n: conv.sexp_of_int(n).value,
        "string_of_float": _string_of_float,
    }
    for name, converter in conv.CONVERTERS.items():
        bindings[f"{CONV_MODULE}.{SEXP_OF_PREFIX}{name}"] = converter
        bindings[f"{SEXP_OF_PREFIX}{name}"] = converter
    return bindings


class ExecutionEnvironment:
    """
    Single scope stack: all variables keyed by name.
    - enter_scope(): push new scope
    - exit_scope(): pop
    - set_value(name, value): store in current (top) scope
    - lookup(name): innermost to outermost; KeyError when unbound
    """
    _scope_stack: List[Dict[str, Any]]

    def __init__(self, with_builtins: bool = True):
        self._scope_stack = [builtin_bindings() if with_builtins else {}, {}]

    def enter_scope(self) -> None:
        self._scope_stack.append({})

    def exit_scope(self) -> None:
        if len(self._scope_stack) <= 1:
            raise RuntimeError("Cannot exit scope: no active scope")
        self._scope_stack.pop()

    @contextmanager
    def scope(self) -> Iterator[None]:
        """Context manager: enter scope on enter, exit scope on exit (always, including on exception)."""
        self.enter_scope()
        try:
            yield
        finally:
            self.exit_scope()

    def set_value(self, name: str, value: Any) -> None:
        self._scope_stack[-1][name] = value

    def is_bound(self, name: str) -> bool:
        return any(name in scope for scope in self._scope_stack)

    def lookup(self, name: str) -> Any:
        for scope in reversed(self._scope_stack):
            if name in scope:
                return scope[name]
        raise KeyError(name)

    def global_scope(self) -> Dict[str, Any]:
        """User-level top scope (above the builtins): let bindings and inputs."""
        return self._scope_stack[1]
