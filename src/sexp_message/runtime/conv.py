"""
Value-to-S-expression converters

The `Conv.sexp_of_*` functions generated code calls. Converters of
parameterized types are curried: `sexp_of_list(sexp_of_int)` returns the
converter for lists of ints.

Runtime values: int, float, str (also for chars), bool, () for unit,
Python lists for lists and arrays, tuples for tuples, None for the empty
option and the bare value for `Some v`.
"""

from typing import Any, Callable, List

from ..shared.errors import SexpMessageError
from ..shared.types import ConstantKind, INTEGER_BOUNDS
from .sexp import Atom, SexpList, Sexp, is_sexp

Converter = Callable[[Any], Sexp]

OPAQUE_ATOM = Atom("<opaque>")


class SexpConversionError(SexpMessageError):
    """A value does not have the type its converter expects."""


def _type_name(value: Any) -> str:
    if value is None:
        return "None"
    if value == ():
        return "unit"
    return type(value).__name__


def _expect(cond: bool, expected: str, value: Any) -> None:
    if not cond:
        raise SexpConversionError(f"expected {expected}, got {_type_name(value)} {value!r}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_int(kind: ConstantKind, value: Any) -> Sexp:
    _expect(_is_int(value), kind.value, value)
    low, high = INTEGER_BOUNDS[kind]
    if not low <= value <= high:
        raise SexpConversionError(f"{value} does not fit in {kind.value}")
    return Atom(str(value))


def sexp_of_int(value: Any) -> Sexp:
    return _check_int(ConstantKind.INT, value)


def sexp_of_int32(value: Any) -> Sexp:
    return _check_int(ConstantKind.INT32, value)


def sexp_of_int64(value: Any) -> Sexp:
    return _check_int(ConstantKind.INT64, value)


def sexp_of_nativeint(value: Any) -> Sexp:
    return _check_int(ConstantKind.NATIVEINT, value)


def string_of_float(value: float) -> str:
    """Shortest of %.15G and %.17G that reads back as the same float."""
    short = "%.15G" % value
    if value != value or float(short) == value:
        return short
    return "%.17G" % value


def sexp_of_float(value: Any) -> Sexp:
    _expect(isinstance(value, (int, float)) and not isinstance(value, bool), "float", value)
    return Atom(string_of_float(float(value)))


def sexp_of_char(value: Any) -> Sexp:
    _expect(isinstance(value, str) and len(value) == 1, "char", value)
    return Atom(value)


def sexp_of_string(value: Any) -> Sexp:
    _expect(isinstance(value, str), "string", value)
    return Atom(value)


def sexp_of_bool(value: Any) -> Sexp:
    _expect(isinstance(value, bool), "bool", value)
    return Atom("true" if value else "false")


def sexp_of_unit(value: Any) -> Sexp:
    _expect(value == () and isinstance(value, tuple), "unit", value)
    return SexpList([])


def sexp_of_opaque(value: Any) -> Sexp:
    return OPAQUE_ATOM


def sexp_of_sexp(value: Any) -> Sexp:
    _expect(is_sexp(value), "Sexp.t", value)
    return value


def sexp_of_list(sexp_of_a: Converter) -> Converter:
    def convert(value: Any) -> Sexp:
        _expect(isinstance(value, list), "list", value)
        return SexpList([sexp_of_a(v) for v in value])
    return convert


def sexp_of_array(sexp_of_a: Converter) -> Converter:
    def convert(value: Any) -> Sexp:
        _expect(isinstance(value, (list, tuple)) and value != (), "array", value)
        return SexpList([sexp_of_a(v) for v in value])
    return convert


def sexp_of_option(sexp_of_a: Converter) -> Converter:
    def convert(value: Any) -> Sexp:
        if value is None:
            return SexpList([])
        return SexpList([sexp_of_a(value)])
    return convert


def sexp_of_tuple(converters: List[Converter]) -> Converter:
    def convert(value: Any) -> Sexp:
        _expect(isinstance(value, (tuple, list)) and len(value) == len(converters),
                f"{len(converters)}-tuple", value)
        return SexpList([conv(v) for conv, v in zip(converters, value)])
    return convert


def sexp_atom(value: Any) -> Sexp:
    """Sexp.Atom"""
    _expect(isinstance(value, str), "string", value)
    return Atom(value)


def sexp_list(value: Any) -> Sexp:
    """Sexp.List"""
    _expect(isinstance(value, list) and all(is_sexp(v) for v in value), "Sexp.t list", value)
    return SexpList(value)


# Converters bound both as Conv.sexp_of_<name> and unqualified sexp_of_<name>
CONVERTERS = {
    "int": sexp_of_int,
    "int32": sexp_of_int32,
    "int64": sexp_of_int64,
    "nativeint": sexp_of_nativeint,
    "float": sexp_of_float,
    "char": sexp_of_char,
    "string": sexp_of_string,
    "bool": sexp_of_bool,
    "unit": sexp_of_unit,
    "opaque": sexp_of_opaque,
    "list": sexp_of_list,
    "array": sexp_of_array,
    "option": sexp_of_option,
    "tuple": sexp_of_tuple,
}
