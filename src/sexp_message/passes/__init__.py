"""
Compiler passes: the extension registry, the expansion driver pass and the
`[%message]` / `[%here]` expanders.
"""

from .base import (
    BasePass, PassManager, ExpansionContext,
    ExtensionPoint, ExtensionContext, PayloadShape, Transformation, TransformationRegistry,
    default_registry,
)
from .extension_expansion import ExtensionExpansionPass, ExtensionExpander
from .sexp_of_type import sexp_of_core_type
from .here import lift_position_as_string, position_string
from .sexp_message import (
    OmittableSexp, Present, OptionalValue, Absent, ABSENT,
    wrap_if_present, sexp_of_constant, sexp_of_constraint, sexp_of_expr,
    sexp_of_labelled_expr, sexp_of_labelled_exprs, message_arguments, expand,
)
