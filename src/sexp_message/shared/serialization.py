"""
AST Serialization to S-Expressions
==================================

Converts message-language trees (parsed or expanded) to a canonical
S-expression dump for debugging and golden tests. Structure is built as
nested lists with sexpdata.Symbol for keywords, then pretty-printed.
"""

from typing import Any, List

import sexpdata

from .nodes import ASTNode
from .types import ArgLabelKind
from ..utils.config import PRETTY_DUMP_MAX_LINE


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ", max_line: int = PRETTY_DUMP_MAX_LINE) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if sexpr is None:
        return "()"
    if isinstance(sexpr, bool):
        return "true" if sexpr else "false"
    if isinstance(sexpr, (int, float)):
        return str(sexpr)
    # Symbols print bare, strings quoted; sexpdata.dumps knows both
    if isinstance(sexpr, (str, sexpdata.Symbol)):
        return sexpdata.dumps(sexpr)
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * indent
        next_prefix = indent_str * (indent + 1)
        rest = "\n".join(next_prefix + p for p in parts[1:])
        inner = parts[0] + ("\n" + rest if rest else "")
        return f"({inner}\n{prefix})"
    return str(sexpr)


def serialize_ast(node: ASTNode, include_location: bool = False, pretty: bool = True) -> str:
    """
    Serialize an AST node to S-expression text.

    Args:
        node: Program, statement, expression, pattern or type node
        include_location: Append `:loc ("file" line column)` to every node
        pretty: Pretty-printed (default) or compact single-line sexpdata output
    """
    serializer = ASTSerializer(include_location=include_location)
    sexpr = serializer.serialize_to_sexpr(node)
    if pretty:
        return _pretty_dumps(sexpr)
    return sexpdata.dumps(sexpr)


class ASTSerializer:
    """
    AST to structured S-expression serializer.

    Dispatches on the node class name (`_serialize_<ClassName>`).
    """

    def __init__(self, include_location: bool = False):
        self.include_location = include_location

    def _sym(self, s: str) -> Any:
        return sexpdata.Symbol(s)

    def serialize_to_sexpr(self, node: Any) -> Any:
        if node is None:
            return [self._sym("nil")]
        method = getattr(self, f"_serialize_{type(node).__name__}", None)
        if method is None:
            return [self._sym(type(node).__name__), self._sym("...")]
        core = method(node)
        if self.include_location and getattr(node, "location", None) is not None:
            loc = node.location
            core.extend([self._sym(":loc"), [loc.file, loc.line, loc.column]])
        return core

    def _all(self, nodes: List[Any]) -> List[Any]:
        return [self.serialize_to_sexpr(n) for n in nodes]

    def _serialize_Program(self, node) -> list:
        return [self._sym("program")] + self._all(node.statements)

    def _serialize_LetStatement(self, node) -> list:
        return [self._sym("let"), node.name, self.serialize_to_sexpr(node.value)]

    def _serialize_ExpressionStatement(self, node) -> list:
        return [self._sym("expr"), self.serialize_to_sexpr(node.expr)]

    def _serialize_Constant(self, node) -> list:
        return [self._sym("constant"), self._sym(node.kind.value), node.value]

    def _serialize_Identifier(self, node) -> list:
        return [self._sym("ident"), node.name]

    def _serialize_Apply(self, node) -> list:
        args = []
        for arg in node.arguments:
            if arg.label.kind is ArgLabelKind.NOLABEL:
                args.append(self.serialize_to_sexpr(arg.expr))
            else:
                args.append([self._sym(str(arg.label)), self.serialize_to_sexpr(arg.expr)])
        return [self._sym("apply"), self.serialize_to_sexpr(node.function_expr)] + args

    def _serialize_Constraint(self, node) -> list:
        return [self._sym("constraint"), self.serialize_to_sexpr(node.expr), self.serialize_to_sexpr(node.type_expr)]

    def _serialize_Extension(self, node) -> list:
        core = [self._sym("extension"), node.name]
        if node.payload is not None:
            core.append(self.serialize_to_sexpr(node.payload))
        return core

    def _serialize_TupleExpression(self, node) -> list:
        return [self._sym("tuple")] + self._all(node.elements)

    def _serialize_ListLiteral(self, node) -> list:
        return [self._sym("list")] + self._all(node.elements)

    def _serialize_UnitLiteral(self, node) -> list:
        return [self._sym("unit")]

    def _serialize_BinaryExpression(self, node) -> list:
        return [self._sym(node.operator.value), self.serialize_to_sexpr(node.left), self.serialize_to_sexpr(node.right)]

    def _serialize_ConsExpression(self, node) -> list:
        return [self._sym("cons"), self.serialize_to_sexpr(node.head), self.serialize_to_sexpr(node.tail)]

    def _serialize_MatchExpression(self, node) -> list:
        return [self._sym("match"), self.serialize_to_sexpr(node.scrutinee)] + self._all(node.arms)

    def _serialize_MatchArm(self, node) -> list:
        return [self._sym("arm"), self.serialize_to_sexpr(node.pattern), self.serialize_to_sexpr(node.body)]

    def _serialize_WildcardPattern(self, node) -> list:
        return [self._sym("wildcard-pattern")]

    def _serialize_VariablePattern(self, node) -> list:
        return [self._sym("variable-pattern"), node.name]

    def _serialize_ConstructorPattern(self, node) -> list:
        core = [self._sym("constructor-pattern"), node.name]
        if node.argument is not None:
            core.append(self.serialize_to_sexpr(node.argument))
        return core

    def _serialize_TuplePattern(self, node) -> list:
        return [self._sym("tuple-pattern")] + self._all(node.elements)

    def _serialize_ListPattern(self, node) -> list:
        return [self._sym("list-pattern")] + self._all(node.elements)

    def _serialize_ConsPattern(self, node) -> list:
        return [self._sym("cons-pattern"), self.serialize_to_sexpr(node.head), self.serialize_to_sexpr(node.tail)]

    def _serialize_OrPattern(self, node) -> list:
        return [self._sym("or-pattern")] + self._all(node.alternatives)

    def _serialize_AliasPattern(self, node) -> list:
        return [self._sym("alias-pattern"), self.serialize_to_sexpr(node.pattern), node.name]

    def _serialize_TypeConstructor(self, node) -> list:
        return [self._sym("type"), node.name] + self._all(node.arguments)

    def _serialize_TupleType(self, node) -> list:
        return [self._sym("tuple-type")] + self._all(node.elements)
