"""
Frontend: grammar, parser and source printer of the message language.
"""

from .parser import Parser, ParseError
from .printer import string_of_expression, string_of_type, string_of_pattern, string_of_program

__all__ = [
    'Parser',
    'ParseError',
    'string_of_expression',
    'string_of_type',
    'string_of_pattern',
    'string_of_program',
]
