"""
Closed vocabularies of the message language.

Literal kinds, argument label kinds and infix operators are closed sets:
every consumer dispatches over them exhaustively.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConstantKind(Enum):
    """Kinds of literal constants the parser produces."""
    INT = "int"
    CHAR = "char"
    STRING = "string"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    NATIVEINT = "nativeint"


# Literal suffixes of the fixed-width integer kinds
INTEGER_SUFFIXES = {
    "l": ConstantKind.INT32,
    "L": ConstantKind.INT64,
    "n": ConstantKind.NATIVEINT,
}

# Inclusive bounds checked by the literal parser and the runtime converters
INTEGER_BOUNDS = {
    ConstantKind.INT: (-(2 ** 62), 2 ** 62 - 1),
    ConstantKind.INT32: (-(2 ** 31), 2 ** 31 - 1),
    ConstantKind.INT64: (-(2 ** 63), 2 ** 63 - 1),
    ConstantKind.NATIVEINT: (-(2 ** 63), 2 ** 63 - 1),
}


class BinaryOp(Enum):
    """Infix operators, loosest first."""
    CONCAT = "^"
    ADD = "+"
    SUB = "-"
    MUL = "*"

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    @property
    def right_associative(self) -> bool:
        return self is BinaryOp.CONCAT


_PRECEDENCE = {
    BinaryOp.CONCAT: 1,
    BinaryOp.ADD: 2,
    BinaryOp.SUB: 2,
    BinaryOp.MUL: 3,
}


class ArgLabelKind(Enum):
    """Label forms an application argument can carry."""
    NOLABEL = "nolabel"
    LABELLED = "labelled"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class ArgLabel:
    """
    Label of one application argument.

    `~name:e` is LABELLED, `?name:e` is OPTIONAL, a bare `e` is NOLABEL.
    """
    kind: ArgLabelKind
    name: Optional[str] = None

    @classmethod
    def nolabel(cls) -> "ArgLabel":
        return cls(ArgLabelKind.NOLABEL)

    @classmethod
    def labelled(cls, name: str) -> "ArgLabel":
        return cls(ArgLabelKind.LABELLED, name)

    @classmethod
    def optional(cls, name: str) -> "ArgLabel":
        return cls(ArgLabelKind.OPTIONAL, name)

    def __str__(self) -> str:
        if self.kind is ArgLabelKind.NOLABEL:
            return ""
        if self.kind is ArgLabelKind.OPTIONAL:
            return f"?{self.name}"
        return f"~{self.name}"
