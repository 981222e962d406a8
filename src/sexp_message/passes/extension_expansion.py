"""
Extension Expansion Pass

Rust Pattern: rustc_expand::expand::MacroExpander

Replaces every `[%name payload]` node by the output of the expander
registered for `name`. Expansion is outermost-first: an expander sees its
payload exactly as written, and extension nodes inside its output (user
sub-expressions carried through) are expanded afterwards.

A failing expansion is reported at its location and leaves that node as
written; the other sites still expand and the compilation is marked failed.
"""

import logging

from ..shared import (
    ASTRewriter, ASTNode, Program, Extension, ErrorCode, SexpMessageSourceError,
)
from .base import BasePass, ExpansionContext

logger = logging.getLogger("sexp_message.passes.extension_expansion")


class ExtensionExpander(ASTRewriter):
    """Rewriter that expands extension nodes through the registry."""

    def __init__(self, ctx: ExpansionContext):
        self.ctx = ctx
        self.expanded_count = 0
        self.failed_count = 0

    def visit_extension(self, node: Extension) -> ASTNode:
        extension = self.ctx.registry.lookup_extension(node.name)
        if extension is None:
            self.failed_count += 1
            self.ctx.reporter.report_error(
                f"uninterpreted extension '{node.name}'",
                node.location,
                code=ErrorCode.UNKNOWN_EXTENSION.value,
                help=f"registered extensions: {', '.join(sorted(self.ctx.registry.extension_names()))}",
            )
            return node

        try:
            result = extension.expand(node.location, node.payload, self.ctx)
        except SexpMessageSourceError as e:
            self.failed_count += 1
            logger.debug(f"Expansion of [%{node.name}] at {node.location} failed: {e.message}")
            self.ctx.reporter.report_exception(e)
            return node

        self.expanded_count += 1
        return result.accept(self)


class ExtensionExpansionPass(BasePass):
    """Expands all extension nodes of a program."""
    requires = []

    def run(self, program: Program, ctx: ExpansionContext) -> Program:
        expander = ExtensionExpander(ctx)
        expanded = program.accept(expander)
        logger.debug(
            f"Expanded {expander.expanded_count} extension(s), {expander.failed_count} failed"
        )
        return expanded
