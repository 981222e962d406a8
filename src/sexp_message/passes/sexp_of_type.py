"""
Type-directed conversion resolver

Given a type expression written in a constraint, build the expression that
computes its conversion function:

    int                 -> sexp_of_int
    Uri.t               -> Uri.sexp_of_t
    int list            -> sexp_of_list sexp_of_int
    int * string        -> Conv.sexp_of_tuple [sexp_of_int; sexp_of_string]

Converters of parameterized types take the element converters as curried
arguments, so the result is always a function of exactly one value.
"""

import logging
from typing import List

from ..shared import (
    ASTVisitor, Expression, Identifier, Apply, ListLiteral, Constant,
    CoreType, TypeConstructor, TupleType, ErrorCode, SexpMessageSourceError,
)
from ..utils.config import SEXP_OF_PREFIX, SEXP_OF_TUPLE, SEXP_OPTION_TYPE, MODULE_SEPARATOR

logger = logging.getLogger("sexp_message.passes.sexp_of_type")

OPAQUE_TYPE = "sexp_opaque"

# Wrapper types that are only meaningful to a caller and otherwise convert as another type
_TYPE_ALIASES = {
    SEXP_OPTION_TYPE: "option",
    OPAQUE_TYPE: "opaque",
}


def converter_name(type_name: str) -> str:
    """`int` -> `sexp_of_int`, `M.N.t` -> `M.N.sexp_of_t`."""
    *path, base = type_name.split(MODULE_SEPARATOR)
    base = _TYPE_ALIASES.get(base, base) if not path else base
    return MODULE_SEPARATOR.join(path + [SEXP_OF_PREFIX + base])


class TypeConversionResolver(ASTVisitor[Expression]):
    """Visitor from CoreType to the conversion-function expression."""

    def visit_constant(self, node: Constant) -> Expression:
        raise SexpMessageSourceError(
            "expected a type", node.location, error_code=ErrorCode.UNSUPPORTED_TYPE.value
        )

    def visit_identifier(self, node: Identifier) -> Expression:
        raise SexpMessageSourceError(
            f"expected a type, found `{node.name}`", node.location,
            error_code=ErrorCode.UNSUPPORTED_TYPE.value,
        )

    def visit_type_constructor(self, node: TypeConstructor) -> Expression:
        fn = Identifier(converter_name(node.name), node.location)
        # `t sexp_opaque` never looks at its argument type
        if not node.arguments or node.name == OPAQUE_TYPE:
            return fn
        args: List[Expression] = [arg.accept(self) for arg in node.arguments]
        return Apply.positional(fn, args, node.location)

    def visit_tuple_type(self, node: TupleType) -> Expression:
        if len(node.elements) < 2:
            raise SexpMessageSourceError(
                "tuple types need at least two components", node.location,
                error_code=ErrorCode.UNSUPPORTED_TYPE.value,
            )
        converters = ListLiteral([e.accept(self) for e in node.elements], node.location)
        return Apply.positional(Identifier(SEXP_OF_TUPLE, node.location), [converters], node.location)


def sexp_of_core_type(type_expr: CoreType) -> Expression:
    """Resolve the conversion for `type_expr` (the type-directed resolver capability)."""
    result = type_expr.accept(TypeConversionResolver())
    logger.debug(f"Resolved converter for {type_expr!r}")
    return result
