"""
Message Language AST Transformers
=================================

Parse-tree to AST conversion, with constant decoding split out.
"""

from .base import MessageTransformer
from .literals import LiteralParser

__all__ = [
    'MessageTransformer',
    'LiteralParser',
]
