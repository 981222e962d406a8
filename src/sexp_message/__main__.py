"""CLI entry point: run `sexp-message file.sxm` or `python -m sexp_message file.sxm`."""

import sys
import json
import logging
from pathlib import Path


def _parse_input(item: str):
    name, sep, raw = item.partition("=")
    if not sep or not name:
        raise ValueError(f"expected NAME=JSON, got {item!r}")
    return name, json.loads(raw)


def main(argv=None) -> int:
    import argparse
    from .compiler.driver import CompilerDriver
    from .runtime.runtime import SexpMessageRuntime
    from .runtime.sexp import is_sexp

    parser = argparse.ArgumentParser(prog="sexp-message", description="Expand and run a message (.sxm) file.")
    parser.add_argument("file", type=Path, help="Path to .sxm source file")
    parser.add_argument("--expand", action="store_true", help="Print the expanded program instead of running it")
    parser.add_argument("--dump-ast", action="store_true", help="Print the expanded AST as an S-expression")
    parser.add_argument("--input", action="append", default=[], metavar="NAME=JSON",
                        help="Bind NAME to a JSON value (null is the empty option)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    path = args.file.resolve()
    if not path.is_file():
        sys.stderr.write(f"sexp-message: error: file not found: {path}\n")
        return 1

    try:
        inputs = dict(_parse_input(item) for item in args.input)
    except ValueError as e:
        sys.stderr.write(f"sexp-message: error: bad --input: {e}\n")
        return 2

    compiler = CompilerDriver()
    result = compiler.compile_file(path)
    if not result.success:
        if result.ctx is not None and result.ctx.reporter.has_errors():
            sys.stderr.write(result.ctx.reporter.format_all_errors() + "\n")
        else:
            sys.stderr.write("sexp-message: compilation failed\n")
        return 1

    if args.dump_ast:
        from .shared.serialization import serialize_ast
        print(serialize_ast(result.program))
        return 0
    if args.expand:
        from .frontend.printer import string_of_program
        print(string_of_program(result.program))
        return 0

    exec_result = SexpMessageRuntime().execute(result, inputs=inputs)
    if exec_result.error is not None:
        sys.stderr.write(f"{exec_result.error}\n")
        return 1

    value = exec_result.value
    if is_sexp(value):
        print(value.to_string())
    elif value is not None:
        print(value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
