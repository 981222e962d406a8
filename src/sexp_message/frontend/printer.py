"""
Source Printer

Renders AST nodes back to message-language source text. Parentheses are
inserted only where precedence requires them, so `string_of_expression`
of a parsed fragment gives the canonical spelling of what the user wrote.
Generated `match` and `::` code is printed too, for `--expand` output.
"""

import math
from typing import List

from ..shared import (
    ASTNode, ASTVisitor, ArgLabelKind, ConstantKind,
    Program, LetStatement, ExpressionStatement, Expression,
    Constant, Identifier, Argument, Apply, Constraint, Extension,
    TupleExpression, ListLiteral, UnitLiteral, BinaryExpression,
    ConsExpression, MatchExpression, MatchArm,
    Pattern, WildcardPattern, VariablePattern, ConstructorPattern, TuplePattern,
    ListPattern, ConsPattern, OrPattern, AliasPattern,
    CoreType, TypeConstructor, TupleType,
)

# Expression levels: a node printed where a higher level is required gets parentheses
LEVEL_TOP = 0
LEVEL_ELEMENT = 1
LEVEL_CONS = 15
LEVEL_APPLY = 50
LEVEL_ATOM = 60

# Pattern levels
PAT_ALIAS = 0
PAT_OR = 1
PAT_CONS = 2
PAT_CONSTRUCTOR = 3
PAT_ATOM = 4

# Type levels
TYPE_TUPLE = 0
TYPE_APPLY = 1

_INTEGER_SUFFIX = {
    ConstantKind.INT: "",
    ConstantKind.INT32: "l",
    ConstantKind.INT64: "L",
    ConstantKind.NATIVEINT: "n",
}

_CHAR_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
}


def escape_string(text: str, quote: str = '"') -> str:
    """OCaml String.escaped, without the surrounding quotes."""
    out: List[str] = []
    for ch in text:
        if ch == quote:
            out.append("\\" + ch)
        elif ch in _CHAR_ESCAPES:
            out.append(_CHAR_ESCAPES[ch])
        elif ord(ch) < 32 or ord(ch) == 127:
            out.append(f"\\{ord(ch):03d}")
        else:
            out.append(ch)
    return "".join(out)


def format_float_literal(value: float) -> str:
    """Float literal as OCaml prints it: always with a dot or exponent."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "infinity" if value > 0 else "neg_infinity"
    text = repr(value)
    if "." not in text and "e" not in text:
        text += "."
    return text


def binary_level(node: BinaryExpression) -> int:
    return node.operator.precedence * 10


class ExpressionPrinter(ASTVisitor[str]):
    """
    Visitor producing source text.

    The required level of the enclosing context is kept in `self._level`
    while a child is visited; see `_at`.
    """

    def __init__(self) -> None:
        self._level = LEVEL_TOP

    def _at(self, node: ASTNode, level: int) -> str:
        saved = self._level
        self._level = level
        try:
            return node.accept(self)
        finally:
            self._level = saved

    def _wrap(self, text: str, own_level: int) -> str:
        return f"({text})" if own_level < self._level else text

    # ---- statements -----------------------------------------------------------

    def visit_program(self, node: Program) -> str:
        return "\n".join(self._at(s, LEVEL_TOP) for s in node.statements)

    def visit_let_statement(self, node: LetStatement) -> str:
        return f"let {node.name} = {self._at(node.value, LEVEL_TOP)};"

    def visit_expression_statement(self, node: ExpressionStatement) -> str:
        return f"{self._at(node.expr, LEVEL_TOP)};"

    # ---- expressions ----------------------------------------------------------

    def visit_constant(self, node: Constant) -> str:
        if node.kind is ConstantKind.STRING:
            return f'"{escape_string(node.value)}"'
        if node.kind is ConstantKind.CHAR:
            return "'" + escape_string(node.value, quote="'") + "'"
        if node.literal is not None:
            text = node.literal
        elif node.kind is ConstantKind.FLOAT:
            text = format_float_literal(node.value)
        else:
            text = f"{node.value}{_INTEGER_SUFFIX[node.kind]}"
        return self._wrap(text, LEVEL_APPLY) if text.startswith("-") else text

    def visit_identifier(self, node: Identifier) -> str:
        return node.name

    def _argument(self, arg: Argument) -> str:
        label = arg.label
        if label.kind is ArgLabelKind.NOLABEL:
            return self._at(arg.expr, LEVEL_ATOM)
        prefix = "~" if label.kind is ArgLabelKind.LABELLED else "?"
        if isinstance(arg.expr, Identifier) and arg.expr.name == label.name:
            return f"{prefix}{label.name}"
        return f"{prefix}{label.name}:{self._at(arg.expr, LEVEL_ATOM)}"

    def visit_apply(self, node: Apply) -> str:
        # Application is left-associative: `(f a) b` prints as `f a b`
        parts = [self._at(node.function_expr, LEVEL_APPLY)]
        parts.extend(self._argument(arg) for arg in node.arguments)
        return self._wrap(" ".join(parts), LEVEL_APPLY)

    def visit_constraint(self, node: Constraint) -> str:
        return f"({self._at(node.expr, LEVEL_ELEMENT)} : {string_of_type(node.type_expr)})"

    def visit_extension(self, node: Extension) -> str:
        if node.payload is None:
            return f"[%{node.name}]"
        return f"[%{node.name} {self._at(node.payload, LEVEL_ELEMENT)}]"

    def visit_tuple_expression(self, node: TupleExpression) -> str:
        return "(" + ", ".join(self._at(e, LEVEL_ELEMENT) for e in node.elements) + ")"

    def visit_list_literal(self, node: ListLiteral) -> str:
        return "[" + "; ".join(self._at(e, LEVEL_ELEMENT) for e in node.elements) + "]"

    def visit_unit_literal(self, node: UnitLiteral) -> str:
        return "()"

    def visit_binary_expression(self, node: BinaryExpression) -> str:
        level = binary_level(node)
        # The associative side may sit at the same level; the other side needs a tighter one
        if node.operator.right_associative:
            left_level, right_level = level + 1, level
        else:
            left_level, right_level = level, level + 1
        text = f"{self._at(node.left, left_level)} {node.operator.value} {self._at(node.right, right_level)}"
        return self._wrap(text, level)

    def visit_cons_expression(self, node: ConsExpression) -> str:
        text = f"{self._at(node.head, LEVEL_CONS + 1)} :: {self._at(node.tail, LEVEL_CONS)}"
        return self._wrap(text, LEVEL_CONS)

    def visit_match_expression(self, node: MatchExpression) -> str:
        arms = " | ".join(self._at(arm, LEVEL_TOP) for arm in node.arms)
        text = f"match {self._at(node.scrutinee, LEVEL_ELEMENT)} with {arms}"
        return f"({text})" if self._level > LEVEL_TOP else text

    def visit_match_arm(self, node: MatchArm) -> str:
        # Arm bodies are parenthesized when they are matches themselves
        return f"{string_of_pattern(node.pattern)} -> {self._at(node.body, LEVEL_ELEMENT)}"


class PatternPrinter(ASTVisitor[str]):
    """Visitor producing pattern text for generated match arms."""

    def __init__(self) -> None:
        self._level = PAT_ALIAS

    def _at(self, node: Pattern, level: int) -> str:
        saved = self._level
        self._level = level
        try:
            return node.accept(self)
        finally:
            self._level = saved

    def _wrap(self, text: str, own_level: int) -> str:
        return f"({text})" if own_level < self._level else text

    def visit_constant(self, node: Constant) -> str:
        return ExpressionPrinter().visit_constant(node)

    def visit_identifier(self, node: Identifier) -> str:
        return node.name

    def visit_wildcard_pattern(self, node: WildcardPattern) -> str:
        return "_"

    def visit_variable_pattern(self, node: VariablePattern) -> str:
        return node.name

    def visit_constructor_pattern(self, node: ConstructorPattern) -> str:
        if node.argument is None:
            return node.name
        return self._wrap(f"{node.name} {self._at(node.argument, PAT_ATOM)}", PAT_CONSTRUCTOR)

    def visit_tuple_pattern(self, node: TuplePattern) -> str:
        return "(" + ", ".join(self._at(p, PAT_OR) for p in node.elements) + ")"

    def visit_list_pattern(self, node: ListPattern) -> str:
        return "[" + "; ".join(self._at(p, PAT_OR) for p in node.elements) + "]"

    def visit_cons_pattern(self, node: ConsPattern) -> str:
        text = f"{self._at(node.head, PAT_CONS + 1)} :: {self._at(node.tail, PAT_CONS)}"
        return self._wrap(text, PAT_CONS)

    def visit_or_pattern(self, node: OrPattern) -> str:
        text = " | ".join(self._at(p, PAT_OR + 1) for p in node.alternatives)
        return self._wrap(text, PAT_OR)

    def visit_alias_pattern(self, node: AliasPattern) -> str:
        text = f"{self._at(node.pattern, PAT_CONS)} as {node.name}"
        return self._wrap(text, PAT_ALIAS)


class TypePrinter(ASTVisitor[str]):
    """Visitor producing type text: `int`, `int list`, `(int * string) option`."""

    def __init__(self) -> None:
        self._level = TYPE_TUPLE

    def _at(self, node: CoreType, level: int) -> str:
        saved = self._level
        self._level = level
        try:
            return node.accept(self)
        finally:
            self._level = saved

    def visit_constant(self, node: Constant) -> str:
        raise TypeError("constants do not occur in types")

    def visit_identifier(self, node: Identifier) -> str:
        return node.name

    def visit_type_constructor(self, node: TypeConstructor) -> str:
        if not node.arguments:
            return node.name
        if len(node.arguments) == 1:
            return f"{self._at(node.arguments[0], TYPE_APPLY)} {node.name}"
        args = ", ".join(self._at(a, TYPE_TUPLE) for a in node.arguments)
        return f"({args}) {node.name}"

    def visit_tuple_type(self, node: TupleType) -> str:
        text = " * ".join(self._at(e, TYPE_APPLY) for e in node.elements)
        return f"({text})" if self._level > TYPE_TUPLE else text


def string_of_expression(expr: Expression) -> str:
    """Render an expression as source text (used for argument name tags)."""
    return ExpressionPrinter()._at(expr, LEVEL_TOP)


def string_of_pattern(pattern: Pattern) -> str:
    return PatternPrinter()._at(pattern, PAT_ALIAS)


def string_of_type(type_expr: CoreType) -> str:
    return TypePrinter()._at(type_expr, TYPE_TUPLE)


def string_of_program(program: Program) -> str:
    return ExpressionPrinter().visit_program(program)
