"""
sexp_message utilities package
"""

from .io_utils import read_source_file, write_text_file

__all__ = ["read_source_file", "write_text_file"]
