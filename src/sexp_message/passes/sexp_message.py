"""
`[%message ...]` expander

Rewrites a call-like payload into an expression building an S-expression
that mirrors the call site:

    [%message "request failed" ~url (status : int)]
    ==> Sexp.List [Conv.sexp_of_string "request failed";
                   Sexp.List [Sexp.Atom "url"; Conv.sexp_of_string url];
                   Sexp.List [Sexp.Atom "status"; sexp_of_int status]]

Each argument is classified as Present (always contributes), OptionalValue
(contributes when a runtime option holds a value) or Absent (the literal
""), then tagged with its label, then folded right-to-left into one list
expression. Without OptionalValue entries the single-element collapse is
done here; with them it is emitted as a runtime match.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar
import logging

from ..shared import (
    SourceLocation, ErrorCode, SexpMessageSourceError,
    ArgLabel, ArgLabelKind, ConstantKind,
    Expression, Constant, Identifier, Argument, Apply, Constraint, Extension,
    ListLiteral, TupleExpression, ConsExpression, MatchExpression, MatchArm,
    CoreType, TypeConstructor,
    WildcardPattern, VariablePattern, ConstructorPattern, TuplePattern,
    ListPattern, ConsPattern, OrPattern, AliasPattern,
)
from ..utils.config import (
    MESSAGE_EXTENSION_NAME, MESSAGE_TRANSFORMATION_NAME, HERE_EXTENSION_NAME,
    NO_TAG_LABEL, SEXP_OPTION_TYPE, SEXP_ATOM_CONSTRUCTOR, SEXP_LIST_CONSTRUCTOR,
    CONV_MODULE, SEXP_OF_PREFIX, SEXP_OF_STRING,
    OPTION_VALUE_BINDER, TAIL_BINDER, HEAD_BINDER, RESULT_BINDER,
    NONE_CONSTRUCTOR, SOME_CONSTRUCTOR,
)
from .base import ExtensionPoint, ExtensionContext, PayloadShape, TransformationRegistry

logger = logging.getLogger("sexp_message.passes.sexp_message")

T = TypeVar('T')

Wrap = Callable[[Expression], Expression]


# =====================================================================
# Classified values
# =====================================================================

class OmittableSexp(ABC):
    """Classification of one message argument."""

    @abstractmethod
    def accept(self, visitor: 'OmittableSexpVisitor[T]') -> T:
        raise NotImplementedError


@dataclass(frozen=True)
class Present(OmittableSexp):
    """Always contributes `expr`, an S-expression-valued expression."""
    expr: Expression

    def accept(self, visitor: 'OmittableSexpVisitor[T]') -> T:
        return visitor.visit_present(self)


@dataclass(frozen=True)
class OptionalValue(OmittableSexp):
    """
    Contributes `wrap(v)` when `expr` evaluates to `Some v`, nothing on `None`.

    `wrap` runs at generation time on the placeholder for `v`; only the
    generated code it returns is conditional.
    """
    location: Optional[SourceLocation]
    expr: Expression
    wrap: Wrap

    def accept(self, visitor: 'OmittableSexpVisitor[T]') -> T:
        return visitor.visit_optional(self)


@dataclass(frozen=True)
class Absent(OmittableSexp):
    """Contributes nothing; decided at generation time."""

    def accept(self, visitor: 'OmittableSexpVisitor[T]') -> T:
        return visitor.visit_absent(self)


ABSENT = Absent()


class OmittableSexpVisitor(ABC, Generic[T]):
    """Exhaustive dispatch over the three classifications."""

    @abstractmethod
    def visit_present(self, value: Present) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_optional(self, value: OptionalValue) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_absent(self, value: Absent) -> T:
        raise NotImplementedError


class _WrapIfPresent(OmittableSexpVisitor[OmittableSexp]):
    def __init__(self, f: Wrap):
        self.f = f

    def visit_present(self, value: Present) -> OmittableSexp:
        return Present(self.f(value.expr))

    def visit_optional(self, value: OptionalValue) -> OmittableSexp:
        k, f = value.wrap, self.f
        return OptionalValue(value.location, value.expr, lambda e: f(k(e)))

    def visit_absent(self, value: Absent) -> OmittableSexp:
        return value


def wrap_if_present(value: OmittableSexp, f: Wrap) -> OmittableSexp:
    """Apply `f` to whatever `value` contributes, lazily for OptionalValue."""
    return value.accept(_WrapIfPresent(f))


def is_optional(value: OmittableSexp) -> bool:
    return isinstance(value, OptionalValue)


# =====================================================================
# Generated-code builders
# =====================================================================

def sexp_atom(location: Optional[SourceLocation], expr: Expression) -> Expression:
    return Apply.positional(Identifier(SEXP_ATOM_CONSTRUCTOR, location), [expr], location)


def sexp_list(location: Optional[SourceLocation], expr: Expression) -> Expression:
    return Apply.positional(Identifier(SEXP_LIST_CONSTRUCTOR, location), [expr], location)


def sexp_inline(location: Optional[SourceLocation], items: List[Expression]) -> Expression:
    """A single item stands for itself; anything else becomes `Sexp.List [...]`."""
    if len(items) == 1:
        return items[0]
    return sexp_list(location, ListLiteral(items, location))


def prepend(location: Optional[SourceLocation], head: Expression, tail: Expression) -> Expression:
    """`head :: tail`, kept as a list literal while the tail is one."""
    if isinstance(tail, ListLiteral):
        return ListLiteral([head] + tail.elements, location)
    return ConsExpression(head, tail, location)


# =====================================================================
# Constant converter
# =====================================================================

_CONSTANT_CONVERTERS = {
    ConstantKind.INT: "int",
    ConstantKind.CHAR: "char",
    ConstantKind.STRING: "string",
    ConstantKind.FLOAT: "float",
    ConstantKind.INT32: "int32",
    ConstantKind.INT64: "int64",
    ConstantKind.NATIVEINT: "nativeint",
}


def sexp_of_constant(location: Optional[SourceLocation], constant: Constant) -> Expression:
    """`Conv.sexp_of_<kind> <constant>`"""
    type_name = _CONSTANT_CONVERTERS.get(constant.kind)
    if type_name is None:
        raise SexpMessageSourceError(
            f"unsupported literal kind: {constant.kind}",
            location,
            error_code=ErrorCode.UNSUPPORTED_LITERAL_KIND.value,
        )
    fn = Identifier(f"{CONV_MODULE}.{SEXP_OF_PREFIX}{type_name}", location)
    return Apply.positional(fn, [constant], location)


# =====================================================================
# Constraint resolver
# =====================================================================

def _sexp_option_argument(type_expr: CoreType) -> Optional[CoreType]:
    if (isinstance(type_expr, TypeConstructor)
            and type_expr.name == SEXP_OPTION_TYPE
            and len(type_expr.arguments) == 1):
        return type_expr.arguments[0]
    return None


def sexp_of_constraint(location: Optional[SourceLocation], expr: Expression,
                       type_expr: CoreType, resolver: Callable[[CoreType], Expression]) -> OmittableSexp:
    """`(e : t sexp_option)` is optional, any other annotation is present."""
    inner = _sexp_option_argument(type_expr)
    if inner is not None:
        sexp_of = resolver(inner)
        return OptionalValue(location, expr, lambda e: Apply.positional(sexp_of, [e], location))
    sexp_of = resolver(type_expr)
    return Present(Apply.positional(sexp_of, [expr], location))


# =====================================================================
# Argument classifier
# =====================================================================

def rewrite_here(expr: Expression, ctx) -> Expression:
    if isinstance(expr, Extension) and expr.name == HERE_EXTENSION_NAME and expr.payload is None:
        return ctx.position_lifter(expr.location)
    return expr


def sexp_of_expr(expr: Expression, ctx) -> OmittableSexp:
    expr = rewrite_here(expr, ctx)
    location = expr.location
    if isinstance(expr, Constant):
        if expr.is_empty_string():
            return ABSENT
        return Present(sexp_of_constant(location, expr))
    if isinstance(expr, Constraint):
        return sexp_of_constraint(location, expr.expr, expr.type_expr, ctx.type_resolver)
    # Anything else is taken to be a string already
    return Present(Apply.positional(Identifier(SEXP_OF_STRING, location), [expr], location))


# =====================================================================
# Label encoder
# =====================================================================

def _tagged(location: Optional[SourceLocation], tag: str) -> Wrap:
    return lambda e: sexp_inline(location, [sexp_atom(location, Constant.string(tag, location)), e])


def sexp_of_labelled_expr(arg: Argument, ctx) -> OmittableSexp:
    label, expr = arg.label, arg.expr
    location = expr.location

    if label.kind is ArgLabelKind.OPTIONAL:
        raise SexpMessageSourceError(
            "optional argument not allowed here",
            location,
            error_code=ErrorCode.OPTIONAL_LABEL_NOT_ALLOWED.value,
            help=f"use a labelled argument `~{label.name}:` instead",
            label=f"`?{label.name}` is optional",
        )

    if label.kind is ArgLabelKind.NOLABEL:
        if isinstance(expr, Constraint):
            tag = ctx.printer(expr.expr)
            return wrap_if_present(sexp_of_expr(expr, ctx), _tagged(location, tag))
        return sexp_of_expr(expr, ctx)

    if label.name == NO_TAG_LABEL:
        return sexp_of_expr(expr, ctx)
    return wrap_if_present(sexp_of_expr(expr, ctx), _tagged(location, label.name))


# =====================================================================
# Expression assembler
# =====================================================================

class _ListFolder(OmittableSexpVisitor[Expression]):
    """Prepends one classified value onto the list built so far."""

    def __init__(self, location: Optional[SourceLocation], acc: Expression):
        self.location = location
        self.acc = acc

    def visit_present(self, value: Present) -> Expression:
        return prepend(self.location, value.expr, self.acc)

    def visit_optional(self, value: OptionalValue) -> Expression:
        # Head and tail are matched together so neither is evaluated in the other's scope
        loc = self.location
        some_body = ConsExpression(
            value.wrap(Identifier(OPTION_VALUE_BINDER, loc)), Identifier(TAIL_BINDER, loc), loc
        )
        return MatchExpression(
            TupleExpression([value.expr, self.acc], loc),
            [
                MatchArm(
                    TuplePattern([ConstructorPattern(NONE_CONSTRUCTOR), VariablePattern(TAIL_BINDER)]),
                    Identifier(TAIL_BINDER, loc), loc,
                ),
                MatchArm(
                    TuplePattern([
                        ConstructorPattern(SOME_CONSTRUCTOR, VariablePattern(OPTION_VALUE_BINDER)),
                        VariablePattern(TAIL_BINDER),
                    ]),
                    some_body, loc,
                ),
            ],
            loc,
        )

    def visit_absent(self, value: Absent) -> Expression:
        return self.acc


def _runtime_collapse(location: Optional[SourceLocation], res: Expression) -> Expression:
    """match res with [h] -> h | ([] | _ :: _ :: _) as res -> Sexp.List res"""
    many = ConsPattern(WildcardPattern(), ConsPattern(WildcardPattern(), WildcardPattern()))
    return MatchExpression(
        res,
        [
            MatchArm(ListPattern([VariablePattern(HEAD_BINDER)]), Identifier(HEAD_BINDER, location), location),
            MatchArm(
                AliasPattern(OrPattern([ListPattern([]), many]), RESULT_BINDER),
                sexp_list(location, Identifier(RESULT_BINDER, location)),
                location,
            ),
        ],
        location,
    )


def sexp_of_labelled_exprs(location: Optional[SourceLocation], arguments: List[Argument], ctx) -> Expression:
    values = [sexp_of_labelled_expr(arg, ctx) for arg in arguments]

    res: Expression = ListLiteral([], location)
    for value in reversed(values):
        res = value.accept(_ListFolder(location, res))

    if any(is_optional(v) for v in values):
        return _runtime_collapse(location, res)
    # Presence is fully static here: res is a list literal
    if isinstance(res, ListLiteral) and len(res.elements) == 1:
        return res.elements[0]
    return sexp_list(location, res)


def message_arguments(payload: Expression) -> List[Argument]:
    """An application contributes its head as the first unlabelled argument."""
    if isinstance(payload, Apply):
        return [Argument(ArgLabel.nolabel(), payload.function_expr)] + list(payload.arguments)
    return [Argument(ArgLabel.nolabel(), payload)]


def expand(location: Optional[SourceLocation], payload: Optional[Expression], ctx) -> Expression:
    """Expander of `[%message]` and `[%message e]`."""
    if payload is None:
        return sexp_list(location, ListLiteral([], location))
    arguments = message_arguments(payload)
    logger.debug(f"Expanding [%{MESSAGE_EXTENSION_NAME}] at {location} with {len(arguments)} argument(s)")
    return sexp_of_labelled_exprs(payload.location, arguments, ctx)


message = ExtensionPoint.declare(
    MESSAGE_EXTENSION_NAME, ExtensionContext.EXPRESSION, PayloadShape.OPTIONAL_EXPRESSION, expand,
)


def register(registry: TransformationRegistry) -> None:
    registry.register_transformation(MESSAGE_TRANSFORMATION_NAME, extensions=[message])
