"""
Message Language AST Transformer
Converts the Lark parse tree to AST nodes
"""

from lark import Transformer, v_args
from lark.lexer import Token
from typing import List, Optional, Union
from typing_extensions import TypeAlias
import logging

from ...shared import (
    SourceLocation, ArgLabel, BinaryOp,
    Program, LetStatement, ExpressionStatement, Expression, Statement,
    Identifier, Argument, Apply, Constraint, Extension,
    TupleExpression, ListLiteral, UnitLiteral, BinaryExpression,
    Constant, CoreType, TypeConstructor, TupleType,
)
from .literals import LiteralParser

LarkMeta: TypeAlias = Union[None, object]
TypeChild: TypeAlias = Union[CoreType, Token]

logger: logging.Logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class MessageTransformer(Transformer):
    """
    Builds Program/Expression/CoreType nodes bottom-up.

    Method names are the rule aliases of grammar.lark. Every node gets the
    SourceLocation of the text it was parsed from, so expansion errors can
    point at the exact argument that caused them.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_file: str = ""  # Must be set by parser before use

    def _extract_location(self, meta: LarkMeta) -> SourceLocation:
        if not self.current_file:
            raise RuntimeError(
                "Parser bug: current_file not set. "
                "Parser must set current_file before transforming."
            )
        if meta is None or getattr(meta, "empty", True):
            return SourceLocation(self.current_file, 0, 0)
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line,
            column=token.column,
            start=token.start_pos,
            end=token.end_pos,
            end_line=token.end_line,
            end_column=token.end_column,
        )

    # ---- statements -----------------------------------------------------------

    def program(self, meta: LarkMeta, *statements: Statement) -> Program:
        return Program(list(statements), self._extract_location(meta))

    def let_statement(self, meta: LarkMeta, name: Token, value: Expression) -> LetStatement:
        return LetStatement(str(name), value, self._extract_location(meta))

    def expression_statement(self, meta: LarkMeta, expr: Expression) -> ExpressionStatement:
        return ExpressionStatement(expr, self._extract_location(meta))

    # ---- expressions ----------------------------------------------------------

    def binary_expression(self, meta: LarkMeta, left: Expression, op: Token, right: Expression) -> BinaryExpression:
        return BinaryExpression(left, BinaryOp(str(op)), right, self._extract_location(meta))

    def application(self, meta: LarkMeta, function_expr: Expression, *arguments: Argument) -> Apply:
        return Apply(function_expr, list(arguments), self._extract_location(meta))

    def positional_argument(self, meta: LarkMeta, expr: Expression) -> Argument:
        return Argument.positional(expr)

    def labelled_argument(self, meta: LarkMeta, label: Token, expr: Expression) -> Argument:
        # LABEL token is `~name:`
        return Argument(ArgLabel.labelled(str(label)[1:-1]), expr)

    def punned_labelled_argument(self, meta: LarkMeta, label: Token) -> Argument:
        # `~x` abbreviates `~x:x`
        name = str(label)[1:]
        return Argument(ArgLabel.labelled(name), Identifier(name, self._token_location(label)))

    def optional_argument(self, meta: LarkMeta, label: Token, expr: Expression) -> Argument:
        return Argument(ArgLabel.optional(str(label)[1:-1]), expr)

    def punned_optional_argument(self, meta: LarkMeta, label: Token) -> Argument:
        name = str(label)[1:]
        return Argument(ArgLabel.optional(name), Identifier(name, self._token_location(label)))

    def identifier(self, meta: LarkMeta, name: Token) -> Identifier:
        return Identifier(str(name), self._extract_location(meta))

    def constraint(self, meta: LarkMeta, expr: Expression, type_expr: CoreType) -> Constraint:
        return Constraint(expr, type_expr, self._extract_location(meta))

    def unit(self, meta: LarkMeta) -> UnitLiteral:
        return UnitLiteral(self._extract_location(meta))

    def tuple(self, meta: LarkMeta, *elements: Expression) -> TupleExpression:
        return TupleExpression(list(elements), self._extract_location(meta))

    def empty_list(self, meta: LarkMeta) -> ListLiteral:
        return ListLiteral([], self._extract_location(meta))

    def list_literal(self, meta: LarkMeta, *elements: Expression) -> ListLiteral:
        return ListLiteral(list(elements), self._extract_location(meta))

    def extension(self, meta: LarkMeta, name: Token, payload: Optional[Expression] = None) -> Extension:
        return Extension(str(name), payload, self._extract_location(meta))

    # ---- constants ------------------------------------------------------------

    def integer_constant(self, meta: LarkMeta, token: Token) -> Constant:
        return LiteralParser.parse_integer(str(token), self._extract_location(meta))

    def float_constant(self, meta: LarkMeta, token: Token) -> Constant:
        return LiteralParser.parse_float(str(token), self._extract_location(meta))

    # `+1` is the constant `1`; only `-` changes the value and the spelling
    def signed_integer_constant(self, meta: LarkMeta, sign: Token, token: Token) -> Constant:
        return LiteralParser.parse_integer(str(token), self._extract_location(meta), negative=str(sign) == "-")

    def signed_float_constant(self, meta: LarkMeta, sign: Token, token: Token) -> Constant:
        return LiteralParser.parse_float(str(token), self._extract_location(meta), negative=str(sign) == "-")

    def char_constant(self, meta: LarkMeta, token: Token) -> Constant:
        return LiteralParser.parse_char(str(token), self._extract_location(meta))

    def string_constant(self, meta: LarkMeta, token: Token) -> Constant:
        return LiteralParser.parse_string(str(token), self._extract_location(meta))

    # ---- types ----------------------------------------------------------------

    def type_constructor(self, meta: LarkMeta, name: Token) -> TypeConstructor:
        return TypeConstructor(str(name), [], self._extract_location(meta))

    def type_application(self, meta: LarkMeta, argument: CoreType, name: Token) -> TypeConstructor:
        # `(a * b) list` has one tuple argument; multi-argument constructors are not written
        return TypeConstructor(str(name), [argument], self._extract_location(meta))

    def tuple_type(self, meta: LarkMeta, *children: TypeChild) -> TupleType:
        elements: List[CoreType] = [c for c in children if not isinstance(c, Token)]
        return TupleType(elements, self._extract_location(meta))
