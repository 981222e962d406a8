"""
Shared components: source locations, diagnostics, the AST and its visitors.
"""

from .source_location import SourceLocation, GENERATED_LOCATION
from .errors import (
    Error, ErrorCode, ErrorReporter,
    SexpMessageError, SexpMessageSourceError, SexpMessageRuntimeError, SexpMessageImplementationError,
)
from .types import ConstantKind, BinaryOp, ArgLabel, ArgLabelKind
from .nodes import (
    ASTNode, Expression, Statement, Pattern, CoreType, NodeType,
    Program, LetStatement, ExpressionStatement,
    Constant, Identifier, Argument, Apply, Constraint, Extension,
    TupleExpression, ListLiteral, UnitLiteral, BinaryExpression,
    ConsExpression, MatchExpression, MatchArm,
    WildcardPattern, VariablePattern, ConstructorPattern, TuplePattern,
    ListPattern, ConsPattern, OrPattern, AliasPattern,
    TypeConstructor, TupleType,
)
from .ast_visitor import ASTVisitor, ASTRewriter
