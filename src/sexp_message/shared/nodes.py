"""
Message Language AST Definitions

One tree type serves both the parsed program and the code the expanders
generate: an expansion returns ordinary expression nodes, so the printer,
the serializer and the evaluator need no separate IR.

Visitor Pattern Support:
- All nodes have accept() methods for polymorphic dispatch
- Dataclass equality compares structure only; locations are ignored
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union, TypeVar, TYPE_CHECKING

from .source_location import SourceLocation
from .types import ArgLabel, BinaryOp, ConstantKind

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')


class NodeType(Enum):
    """AST node types"""
    PROGRAM = "program"
    LET_STMT = "let_stmt"
    EXPR_STMT = "expr_stmt"
    CONSTANT = "constant"
    IDENTIFIER = "identifier"
    APPLY = "apply"
    CONSTRAINT = "constraint"
    EXTENSION = "extension"
    TUPLE_EXPR = "tuple_expr"
    LIST_LITERAL = "list_literal"
    UNIT = "unit"
    BINARY_OP = "binary_op"
    CONS = "cons"
    MATCH_EXPR = "match_expr"
    MATCH_ARM = "match_arm"
    WILDCARD_PATTERN = "wildcard_pattern"
    VARIABLE_PATTERN = "variable_pattern"
    CONSTRUCTOR_PATTERN = "constructor_pattern"
    TUPLE_PATTERN = "tuple_pattern"
    LIST_PATTERN = "list_pattern"
    CONS_PATTERN = "cons_pattern"
    OR_PATTERN = "or_pattern"
    ALIAS_PATTERN = "alias_pattern"
    TYPE_CONSTRUCTOR = "type_constructor"
    TUPLE_TYPE = "tuple_type"


class ASTNode:
    """
    Base class for all AST nodes

    Subclasses implement accept() to call the matching visit_* method.
    """
    __slots__ = ('node_type', 'location')

    def __init__(self, node_type: NodeType, location: Optional[SourceLocation]):
        self.node_type = node_type
        self.location = location

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


class Expression(ASTNode):
    """Base class for expressions"""
    __slots__ = ()


class Statement(ASTNode):
    """Base class for statements"""
    __slots__ = ()


class Pattern(ASTNode):
    """Base class for match patterns (only produced by expanders)"""
    __slots__ = ()


class CoreType(ASTNode):
    """Base class for type expressions written in constraints"""
    __slots__ = ()


# =====================================================================
# PROGRAM STRUCTURE
# =====================================================================

@dataclass
class Program(ASTNode):
    """Program root node"""
    statements: List[Statement]

    def __init__(self, statements: List[Statement], location: SourceLocation = None):
        super().__init__(NodeType.PROGRAM, location)
        self.statements = statements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_program(self)


@dataclass
class LetStatement(Statement):
    """Top-level binding: let name = value;"""
    name: str
    value: Expression

    def __init__(self, name: str, value: Expression, location: SourceLocation = None):
        super().__init__(NodeType.LET_STMT, location)
        self.name = name
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_let_statement(self)


@dataclass
class ExpressionStatement(Statement):
    """Expression in statement position; the last one is the program's value."""
    expr: Expression

    def __init__(self, expr: Expression, location: SourceLocation = None):
        super().__init__(NodeType.EXPR_STMT, location or (expr.location if expr else None))
        self.expr = expr

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_expression_statement(self)


# =====================================================================
# EXPRESSIONS
# =====================================================================

@dataclass
class Constant(Expression):
    """
    Literal constant. value is the decoded Python value, kind the literal's kind.

    Numeric literals read from source keep their spelling in `literal`
    (`1e3`, `0x2a`, `-2l`) so they print as written; it takes no part in
    equality.
    """
    value: Union[int, float, str]
    kind: ConstantKind

    def __init__(self, value: Union[int, float, str], kind: ConstantKind, location: SourceLocation = None,
                 literal: Optional[str] = None):
        super().__init__(NodeType.CONSTANT, location)
        self.value = value
        self.kind = kind
        self.literal = literal

    @classmethod
    def string(cls, value: str, location: SourceLocation = None) -> 'Constant':
        return cls(value, ConstantKind.STRING, location)

    def is_empty_string(self) -> bool:
        return self.kind is ConstantKind.STRING and self.value == ""

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_constant(self)


@dataclass
class Identifier(Expression):
    """Identifier, possibly module-qualified (Sexp.List, Conv.sexp_of_int)"""
    name: str

    def __str__(self) -> str:
        return self.name

    def __init__(self, name: str, location: SourceLocation = None):
        super().__init__(NodeType.IDENTIFIER, location)
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_identifier(self)


@dataclass
class Argument:
    """Syntactic argument of an application: a label and the labelled expression."""
    label: ArgLabel
    expr: Expression

    @classmethod
    def positional(cls, expr: Expression) -> 'Argument':
        return cls(ArgLabel.nolabel(), expr)

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.expr.location


@dataclass
class Apply(Expression):
    """
    Application of a function expression to labelled arguments.

    Examples:
    - f x            -> arguments=[Argument(nolabel, x)]
    - f ~y:1 ?z:e    -> arguments=[Argument(~y, 1), Argument(?z, e)]
    """
    function_expr: Expression
    arguments: List[Argument]

    def __init__(self, function_expr: Expression, arguments: List[Argument], location: SourceLocation = None):
        super().__init__(NodeType.APPLY, location)
        self.function_expr = function_expr
        self.arguments = arguments

    @classmethod
    def positional(cls, function_expr: Expression, args: List[Expression], location: SourceLocation = None) -> 'Apply':
        return cls(function_expr, [Argument.positional(a) for a in args], location)

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_apply(self)


@dataclass
class Constraint(Expression):
    """Type-annotated expression: (expr : type_expr)"""
    expr: Expression
    type_expr: CoreType

    def __init__(self, expr: Expression, type_expr: CoreType, location: SourceLocation = None):
        super().__init__(NodeType.CONSTRAINT, location)
        self.expr = expr
        self.type_expr = type_expr

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_constraint(self)


@dataclass
class Extension(Expression):
    """Extension node [%name] or [%name payload], replaced by its expander."""
    name: str
    payload: Optional[Expression] = None

    def __init__(self, name: str, payload: Optional[Expression] = None, location: SourceLocation = None):
        super().__init__(NodeType.EXTENSION, location)
        self.name = name
        self.payload = payload

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_extension(self)


@dataclass
class TupleExpression(Expression):
    """Tuple (a, b, ...) with at least two elements"""
    elements: List[Expression]

    def __init__(self, elements: List[Expression], location: SourceLocation = None):
        super().__init__(NodeType.TUPLE_EXPR, location)
        self.elements = elements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_tuple_expression(self)


@dataclass
class ListLiteral(Expression):
    """List literal [a; b; ...]; [] when elements is empty"""
    elements: List[Expression]

    def __init__(self, elements: List[Expression], location: SourceLocation = None):
        super().__init__(NodeType.LIST_LITERAL, location)
        self.elements = elements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_list_literal(self)


@dataclass
class UnitLiteral(Expression):
    """The unit value ()"""

    def __init__(self, location: SourceLocation = None):
        super().__init__(NodeType.UNIT, location)

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_unit_literal(self)


@dataclass
class BinaryExpression(Expression):
    """Infix operation (a ^ b, a + b, ...)"""
    left: Expression
    operator: BinaryOp
    right: Expression

    def __init__(self, left: Expression, operator: BinaryOp, right: Expression, location: SourceLocation = None):
        super().__init__(NodeType.BINARY_OP, location)
        self.left = left
        self.operator = operator
        self.right = right

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_binary_expression(self)


@dataclass
class ConsExpression(Expression):
    """head :: tail (generated only)"""
    head: Expression
    tail: Expression

    def __init__(self, head: Expression, tail: Expression, location: SourceLocation = None):
        super().__init__(NodeType.CONS, location)
        self.head = head
        self.tail = tail

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_cons_expression(self)


@dataclass
class MatchArm(ASTNode):
    """One `| pattern -> body` arm"""
    pattern: Pattern
    body: Expression

    def __init__(self, pattern: Pattern, body: Expression, location: SourceLocation = None):
        super().__init__(NodeType.MATCH_ARM, location)
        self.pattern = pattern
        self.body = body

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_match_arm(self)


@dataclass
class MatchExpression(Expression):
    """match scrutinee with arms (generated only); first matching arm wins"""
    scrutinee: Expression
    arms: List[MatchArm]

    def __init__(self, scrutinee: Expression, arms: List[MatchArm], location: SourceLocation = None):
        super().__init__(NodeType.MATCH_EXPR, location)
        self.scrutinee = scrutinee
        self.arms = arms

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_match_expression(self)


# =====================================================================
# PATTERNS
# =====================================================================

@dataclass
class WildcardPattern(Pattern):
    """_"""

    def __init__(self, location: SourceLocation = None):
        super().__init__(NodeType.WILDCARD_PATTERN, location)

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_wildcard_pattern(self)


@dataclass
class VariablePattern(Pattern):
    """Binds the matched value to name"""
    name: str

    def __init__(self, name: str, location: SourceLocation = None):
        super().__init__(NodeType.VARIABLE_PATTERN, location)
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_variable_pattern(self)


@dataclass
class ConstructorPattern(Pattern):
    """Option constructors: None, Some p"""
    name: str
    argument: Optional[Pattern] = None

    def __init__(self, name: str, argument: Optional[Pattern] = None, location: SourceLocation = None):
        super().__init__(NodeType.CONSTRUCTOR_PATTERN, location)
        self.name = name
        self.argument = argument

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_constructor_pattern(self)


@dataclass
class TuplePattern(Pattern):
    """(p1, p2, ...)"""
    elements: List[Pattern]

    def __init__(self, elements: List[Pattern], location: SourceLocation = None):
        super().__init__(NodeType.TUPLE_PATTERN, location)
        self.elements = elements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_tuple_pattern(self)


@dataclass
class ListPattern(Pattern):
    """[p1; p2; ...]: matches lists of exactly that length"""
    elements: List[Pattern]

    def __init__(self, elements: List[Pattern], location: SourceLocation = None):
        super().__init__(NodeType.LIST_PATTERN, location)
        self.elements = elements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_list_pattern(self)


@dataclass
class ConsPattern(Pattern):
    """head :: tail"""
    head: Pattern
    tail: Pattern

    def __init__(self, head: Pattern, tail: Pattern, location: SourceLocation = None):
        super().__init__(NodeType.CONS_PATTERN, location)
        self.head = head
        self.tail = tail

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_cons_pattern(self)


@dataclass
class OrPattern(Pattern):
    """p1 | p2 | ...; alternatives bind no variables"""
    alternatives: List[Pattern]

    def __init__(self, alternatives: List[Pattern], location: SourceLocation = None):
        super().__init__(NodeType.OR_PATTERN, location)
        self.alternatives = alternatives

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_or_pattern(self)


@dataclass
class AliasPattern(Pattern):
    """p as name"""
    pattern: Pattern
    name: str

    def __init__(self, pattern: Pattern, name: str, location: SourceLocation = None):
        super().__init__(NodeType.ALIAS_PATTERN, location)
        self.pattern = pattern
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_alias_pattern(self)


# =====================================================================
# TYPE EXPRESSIONS
# =====================================================================

@dataclass
class TypeConstructor(CoreType):
    """
    Type constructor applied to arguments, written postfix:
    `int` -> TypeConstructor("int", []), `int list` -> TypeConstructor("list", [int])
    """
    name: str
    arguments: List[CoreType]

    def __init__(self, name: str, arguments: Optional[List[CoreType]] = None, location: SourceLocation = None):
        super().__init__(NodeType.TYPE_CONSTRUCTOR, location)
        self.name = name
        self.arguments = list(arguments or [])

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_type_constructor(self)


@dataclass
class TupleType(CoreType):
    """t1 * t2 * ..."""
    elements: List[CoreType]

    def __init__(self, elements: List[CoreType], location: SourceLocation = None):
        super().__init__(NodeType.TUPLE_TYPE, location)
        self.elements = elements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_tuple_type(self)
