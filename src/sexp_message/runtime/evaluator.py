"""
Evaluator

Tree-walking evaluation of expanded programs, generated `match` and `::`
code included. Application is curried: `f a b` calls `f(a)` then applies
the result to `b`.
"""

import logging
from typing import Any, Dict, List, Optional

from ..shared import (
    ASTVisitor, ArgLabelKind, BinaryOp, ErrorCode, SourceLocation,
    SexpMessageRuntimeError,
    Program, LetStatement, ExpressionStatement,
    Constant, Identifier, Apply, Constraint, Extension,
    TupleExpression, ListLiteral, UnitLiteral, BinaryExpression,
    ConsExpression, MatchExpression, MatchArm,
    Pattern, WildcardPattern, VariablePattern, ConstructorPattern, TuplePattern,
    ListPattern, ConsPattern, OrPattern, AliasPattern,
)
from ..utils.config import NONE_CONSTRUCTOR, SOME_CONSTRUCTOR
from .conv import SexpConversionError
from .environment import ExecutionEnvironment

logger = logging.getLogger("sexp_message.runtime.evaluator")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Evaluator(ASTVisitor[Any]):
    """
    Evaluates expressions in an ExecutionEnvironment.

    Every failure is a SexpMessageRuntimeError carrying the location of the
    node being evaluated.
    """

    def __init__(self, env: Optional[ExecutionEnvironment] = None):
        self.env = env if env is not None else ExecutionEnvironment()

    def _error(self, message: str, location: Optional[SourceLocation],
               code: ErrorCode = ErrorCode.CONVERSION_ERROR) -> SexpMessageRuntimeError:
        return SexpMessageRuntimeError(message, location, error_code=code.value)

    # ---- statements -----------------------------------------------------------

    def visit_program(self, node: Program) -> Any:
        value = None
        for statement in node.statements:
            result = statement.accept(self)
            if isinstance(statement, ExpressionStatement):
                value = result
        return value

    def visit_let_statement(self, node: LetStatement) -> Any:
        value = node.value.accept(self)
        self.env.set_value(node.name, value)
        return value

    def visit_expression_statement(self, node: ExpressionStatement) -> Any:
        return node.expr.accept(self)

    # ---- expressions ----------------------------------------------------------

    def visit_constant(self, node: Constant) -> Any:
        return node.value

    def visit_identifier(self, node: Identifier) -> Any:
        try:
            return self.env.lookup(node.name)
        except KeyError:
            raise self._error(f"unbound value {node.name}", node.location, ErrorCode.UNBOUND_NAME) from None

    def visit_apply(self, node: Apply) -> Any:
        fn = node.function_expr.accept(self)
        for arg in node.arguments:
            if arg.label.kind is not ArgLabelKind.NOLABEL:
                raise self._error(f"labelled argument {arg.label} is not accepted here", arg.location)
            value = arg.expr.accept(self)
            if not callable(fn):
                raise self._error(
                    f"this expression has a value of type {type(fn).__name__}, it cannot be applied",
                    node.function_expr.location,
                )
            try:
                fn = fn(value)
            except SexpConversionError as e:
                raise self._error(e.message, node.location) from e
        return fn

    def visit_constraint(self, node: Constraint) -> Any:
        # Types are erased at run time
        return node.expr.accept(self)

    def visit_extension(self, node: Extension) -> Any:
        raise self._error(
            f"uninterpreted extension [%{node.name}] reached evaluation",
            node.location,
            ErrorCode.UNEXPANDED_EXTENSION,
        )

    def visit_tuple_expression(self, node: TupleExpression) -> Any:
        return tuple(e.accept(self) for e in node.elements)

    def visit_list_literal(self, node: ListLiteral) -> Any:
        return [e.accept(self) for e in node.elements]

    def visit_unit_literal(self, node: UnitLiteral) -> Any:
        return ()

    def visit_binary_expression(self, node: BinaryExpression) -> Any:
        left = node.left.accept(self)
        right = node.right.accept(self)
        if node.operator is BinaryOp.CONCAT:
            if not (isinstance(left, str) and isinstance(right, str)):
                raise self._error("operator ^ expects two strings", node.location)
            return left + right
        if not (_is_int(left) and _is_int(right)):
            raise self._error(f"operator {node.operator.value} expects two ints", node.location)
        if node.operator is BinaryOp.ADD:
            return left + right
        if node.operator is BinaryOp.SUB:
            return left - right
        return left * right

    def visit_cons_expression(self, node: ConsExpression) -> Any:
        head = node.head.accept(self)
        tail = node.tail.accept(self)
        if not isinstance(tail, list):
            raise self._error("the tail of :: must be a list", node.tail.location)
        return [head] + tail

    def visit_match_expression(self, node: MatchExpression) -> Any:
        value = node.scrutinee.accept(self)
        for arm in node.arms:
            bindings: Dict[str, Any] = {}
            if PatternMatcher().matches(arm.pattern, value, bindings):
                with self.env.scope():
                    for name, bound in bindings.items():
                        self.env.set_value(name, bound)
                    return arm.body.accept(self)
        raise self._error(f"match failure on {value!r}", node.location, ErrorCode.MATCH_FAILURE)

    def visit_match_arm(self, node: MatchArm) -> Any:
        return node.body.accept(self)


class PatternMatcher:
    """Structural pattern matching; dispatch by pattern class name."""

    def matches(self, pattern: Pattern, value: Any, bindings: Dict[str, Any]) -> bool:
        method = getattr(self, f"_match_{type(pattern).__name__}")
        return method(pattern, value, bindings)

    def _match_all(self, patterns: List[Pattern], values: List[Any], bindings: Dict[str, Any]) -> bool:
        return all(self.matches(p, v, bindings) for p, v in zip(patterns, values))

    def _match_WildcardPattern(self, pattern: WildcardPattern, value: Any, bindings: Dict[str, Any]) -> bool:
        return True

    def _match_VariablePattern(self, pattern: VariablePattern, value: Any, bindings: Dict[str, Any]) -> bool:
        bindings[pattern.name] = value
        return True

    def _match_ConstructorPattern(self, pattern: ConstructorPattern, value: Any, bindings: Dict[str, Any]) -> bool:
        if pattern.name == NONE_CONSTRUCTOR:
            return value is None
        if pattern.name == SOME_CONSTRUCTOR:
            if value is None:
                return False
            return pattern.argument is None or self.matches(pattern.argument, value, bindings)
        raise SexpMessageRuntimeError(
            f"unknown constructor {pattern.name}", pattern.location,
            error_code=ErrorCode.MATCH_FAILURE.value,
        )

    def _match_TuplePattern(self, pattern: TuplePattern, value: Any, bindings: Dict[str, Any]) -> bool:
        if not isinstance(value, tuple) or len(value) != len(pattern.elements):
            return False
        return self._match_all(pattern.elements, list(value), bindings)

    def _match_ListPattern(self, pattern: ListPattern, value: Any, bindings: Dict[str, Any]) -> bool:
        if not isinstance(value, list) or len(value) != len(pattern.elements):
            return False
        return self._match_all(pattern.elements, value, bindings)

    def _match_ConsPattern(self, pattern: ConsPattern, value: Any, bindings: Dict[str, Any]) -> bool:
        if not isinstance(value, list) or not value:
            return False
        return self.matches(pattern.head, value[0], bindings) and self.matches(pattern.tail, value[1:], bindings)

    def _match_OrPattern(self, pattern: OrPattern, value: Any, bindings: Dict[str, Any]) -> bool:
        for alternative in pattern.alternatives:
            attempt: Dict[str, Any] = {}
            if self.matches(alternative, value, attempt):
                bindings.update(attempt)
                return True
        return False

    def _match_AliasPattern(self, pattern: AliasPattern, value: Any, bindings: Dict[str, Any]) -> bool:
        if not self.matches(pattern.pattern, value, bindings):
            return False
        bindings[pattern.name] = value
        return True


def evaluate(expr, env: Optional[ExecutionEnvironment] = None) -> Any:
    """Evaluate one expression (or program) in `env`, a fresh environment by default."""
    return expr.accept(Evaluator(env))
