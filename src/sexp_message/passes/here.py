"""
Position lifting: `[%here]` becomes the literal string "file:line:column".

The column is 0-based (offset from the start of the line), the convention
of position strings embedded in generated messages.
"""

from typing import Optional

from ..shared import Constant, Expression, SourceLocation
from ..utils.config import HERE_EXTENSION_NAME, HERE_TRANSFORMATION_NAME
from .base import ExtensionPoint, ExtensionContext, PayloadShape, TransformationRegistry


def position_string(location: SourceLocation) -> str:
    return f"{location.file}:{location.line}:{location.column0}"


def lift_position_as_string(location: SourceLocation) -> Expression:
    return Constant.string(position_string(location), location)


def expand_here(location: SourceLocation, payload: Optional[Expression], ctx) -> Expression:
    return ctx.position_lifter(location)


here = ExtensionPoint.declare(
    HERE_EXTENSION_NAME, ExtensionContext.EXPRESSION, PayloadShape.EMPTY, expand_here,
)


def register(registry: TransformationRegistry) -> None:
    registry.register_transformation(HERE_TRANSFORMATION_NAME, extensions=[here])
