"""
AST Visitor Pattern

This module provides:
1. ASTVisitor (abstract visitor with default traversal)
2. ASTRewriter (visitor that rebuilds the tree bottom-up)

Design:
- Abstract base class with visit_* methods for each AST node type
- Leaf nodes must be handled explicitly; composite nodes traverse by default
- Standard compiler pattern (LLVM, Rust MIR, Swift SIL)
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, List, Optional

from .nodes import (
    ASTNode, Program, LetStatement, ExpressionStatement,
    Constant, Identifier, Argument, Apply, Constraint, Extension,
    TupleExpression, ListLiteral, UnitLiteral, BinaryExpression,
    ConsExpression, MatchExpression, MatchArm,
    WildcardPattern, VariablePattern, ConstructorPattern, TuplePattern,
    ListPattern, ConsPattern, OrPattern, AliasPattern,
    TypeConstructor, TupleType,
)

T = TypeVar('T')


class ASTVisitor(ABC, Generic[T]):
    """
    Base AST visitor with default traversal for all nodes.

    Leaf nodes that MUST be implemented:
    - visit_constant, visit_identifier

    All other nodes visit their children and return None. Override to add
    custom behavior.

    Usage:
        class NameCollector(ASTVisitor[None]):
            def visit_constant(self, node) -> None:
                pass

            def visit_identifier(self, node) -> None:
                self.names.append(node.name)
    """

    @abstractmethod
    def visit_constant(self, node: Constant) -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_constant()")

    @abstractmethod
    def visit_identifier(self, node: Identifier) -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_identifier()")

    def _visit_all(self, nodes: List[Optional[ASTNode]]) -> None:
        for node in nodes:
            if node is not None:
                node.accept(self)

    def visit_program(self, node: Program) -> T:
        self._visit_all(node.statements)

    def visit_let_statement(self, node: LetStatement) -> T:
        node.value.accept(self)

    def visit_expression_statement(self, node: ExpressionStatement) -> T:
        node.expr.accept(self)

    def visit_apply(self, node: Apply) -> T:
        node.function_expr.accept(self)
        self._visit_all([arg.expr for arg in node.arguments])

    def visit_constraint(self, node: Constraint) -> T:
        node.expr.accept(self)
        node.type_expr.accept(self)

    def visit_extension(self, node: Extension) -> T:
        self._visit_all([node.payload])

    def visit_tuple_expression(self, node: TupleExpression) -> T:
        self._visit_all(node.elements)

    def visit_list_literal(self, node: ListLiteral) -> T:
        self._visit_all(node.elements)

    def visit_unit_literal(self, node: UnitLiteral) -> T:
        return None

    def visit_binary_expression(self, node: BinaryExpression) -> T:
        node.left.accept(self)
        node.right.accept(self)

    def visit_cons_expression(self, node: ConsExpression) -> T:
        node.head.accept(self)
        node.tail.accept(self)

    def visit_match_expression(self, node: MatchExpression) -> T:
        node.scrutinee.accept(self)
        self._visit_all(node.arms)

    def visit_match_arm(self, node: MatchArm) -> T:
        node.pattern.accept(self)
        node.body.accept(self)

    # Patterns and types carry no expressions; traversal stops at them by default
    def visit_wildcard_pattern(self, node: WildcardPattern) -> T:
        return None

    def visit_variable_pattern(self, node: VariablePattern) -> T:
        return None

    def visit_constructor_pattern(self, node: ConstructorPattern) -> T:
        return None

    def visit_tuple_pattern(self, node: TuplePattern) -> T:
        return None

    def visit_list_pattern(self, node: ListPattern) -> T:
        return None

    def visit_cons_pattern(self, node: ConsPattern) -> T:
        return None

    def visit_or_pattern(self, node: OrPattern) -> T:
        return None

    def visit_alias_pattern(self, node: AliasPattern) -> T:
        return None

    def visit_type_constructor(self, node: TypeConstructor) -> T:
        return None

    def visit_tuple_type(self, node: TupleType) -> T:
        return None


class ASTRewriter(ASTVisitor[ASTNode]):
    """
    Visitor that returns a rebuilt tree.

    Children are rewritten first; the parent is then reconstructed with the
    original location. Subclasses override the visit_* of the nodes they
    replace and delegate to super() to keep rewriting below them.
    """

    def visit_constant(self, node: Constant) -> ASTNode:
        return node

    def visit_identifier(self, node: Identifier) -> ASTNode:
        return node

    def visit_program(self, node: Program) -> ASTNode:
        return Program([s.accept(self) for s in node.statements], node.location)

    def visit_let_statement(self, node: LetStatement) -> ASTNode:
        return LetStatement(node.name, node.value.accept(self), node.location)

    def visit_expression_statement(self, node: ExpressionStatement) -> ASTNode:
        return ExpressionStatement(node.expr.accept(self), node.location)

    def visit_apply(self, node: Apply) -> ASTNode:
        return Apply(
            node.function_expr.accept(self),
            [Argument(arg.label, arg.expr.accept(self)) for arg in node.arguments],
            node.location,
        )

    def visit_constraint(self, node: Constraint) -> ASTNode:
        return Constraint(node.expr.accept(self), node.type_expr, node.location)

    def visit_extension(self, node: Extension) -> ASTNode:
        payload = node.payload.accept(self) if node.payload is not None else None
        return Extension(node.name, payload, node.location)

    def visit_tuple_expression(self, node: TupleExpression) -> ASTNode:
        return TupleExpression([e.accept(self) for e in node.elements], node.location)

    def visit_list_literal(self, node: ListLiteral) -> ASTNode:
        return ListLiteral([e.accept(self) for e in node.elements], node.location)

    def visit_unit_literal(self, node: UnitLiteral) -> ASTNode:
        return node

    def visit_binary_expression(self, node: BinaryExpression) -> ASTNode:
        return BinaryExpression(node.left.accept(self), node.operator, node.right.accept(self), node.location)

    def visit_cons_expression(self, node: ConsExpression) -> ASTNode:
        return ConsExpression(node.head.accept(self), node.tail.accept(self), node.location)

    def visit_match_expression(self, node: MatchExpression) -> ASTNode:
        return MatchExpression(
            node.scrutinee.accept(self),
            [arm.accept(self) for arm in node.arms],
            node.location,
        )

    def visit_match_arm(self, node: MatchArm) -> ASTNode:
        return MatchArm(node.pattern, node.body.accept(self), node.location)

    def visit_wildcard_pattern(self, node: WildcardPattern) -> ASTNode:
        return node

    def visit_variable_pattern(self, node: VariablePattern) -> ASTNode:
        return node

    def visit_constructor_pattern(self, node: ConstructorPattern) -> ASTNode:
        return node

    def visit_tuple_pattern(self, node: TuplePattern) -> ASTNode:
        return node

    def visit_list_pattern(self, node: ListPattern) -> ASTNode:
        return node

    def visit_cons_pattern(self, node: ConsPattern) -> ASTNode:
        return node

    def visit_or_pattern(self, node: OrPattern) -> ASTNode:
        return node

    def visit_alias_pattern(self, node: AliasPattern) -> ASTNode:
        return node

    def visit_type_constructor(self, node: TypeConstructor) -> ASTNode:
        return node

    def visit_tuple_type(self, node: TupleType) -> ASTNode:
        return node
