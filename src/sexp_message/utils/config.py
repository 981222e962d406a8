"""
Configuration constants to replace magic strings throughout sexp_message
"""

import os
import tempfile

# Extension points recognized by the expansion pass
MESSAGE_EXTENSION_NAME = "message"
MESSAGE_TRANSFORMATION_NAME = "sexp_message"
HERE_EXTENSION_NAME = "here"
HERE_TRANSFORMATION_NAME = "here"

# Label that requests an untagged argument: ~_:expr
NO_TAG_LABEL = "_"

# Type constructor marking a conditionally present message argument
SEXP_OPTION_TYPE = "sexp_option"

# Names referenced by generated code (bound by the runtime environment)
SEXP_ATOM_CONSTRUCTOR = "Sexp.Atom"
SEXP_LIST_CONSTRUCTOR = "Sexp.List"
CONV_MODULE = "Conv"
SEXP_OF_PREFIX = "sexp_of_"
SEXP_OF_STRING = f"{CONV_MODULE}.{SEXP_OF_PREFIX}string"
SEXP_OF_TUPLE = f"{CONV_MODULE}.{SEXP_OF_PREFIX}tuple"
MODULE_SEPARATOR = "."

# Binders introduced by generated match expressions
OPTION_VALUE_BINDER = "v"
TAIL_BINDER = "tl"
HEAD_BINDER = "h"
RESULT_BINDER = "res"
NONE_CONSTRUCTOR = "None"
SOME_CONSTRUCTOR = "Some"

# Parser configuration (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "sexp_message_parser.cache")
DEFAULT_SOURCE_FILE = "main.sxm"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Debug dumps
DUMP_AST_ENV_VAR = "SEXP_MESSAGE_DUMP_AST"
DUMP_AST_DIR = "ast_dumps"
PRETTY_DUMP_MAX_LINE = 100
