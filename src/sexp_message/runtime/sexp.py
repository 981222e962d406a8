"""
S-expression values

An S-expression is an Atom (a string leaf) or a SexpList of S-expressions.
`to_string` gives the machine form: single spaces, atoms quoted only when
they could not be read back unquoted.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple, Union

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
}

_RESERVED_CHARS = frozenset('()";\\')


def must_escape(text: str) -> bool:
    """True when `text` needs quotes to read back as one atom."""
    if not text:
        return True
    if "#|" in text or "|#" in text or text.startswith("#;"):
        return True
    for ch in text:
        if ch in _RESERVED_CHARS or ord(ch) <= 32 or ord(ch) >= 127:
            return True
    return False


def escaped(text: str) -> str:
    """OCaml String.escaped: non-printable and non-ASCII bytes become \\ddd."""
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif 32 <= ord(ch) < 127:
            out.append(ch)
        else:
            out.extend(f"\\{b:03d}" for b in ch.encode("utf-8"))
    return "".join(out)


@dataclass(frozen=True)
class Atom:
    value: str

    def to_string(self) -> str:
        if must_escape(self.value):
            return f'"{escaped(self.value)}"'
        return self.value

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class SexpList:
    items: Tuple["Sexp", ...] = ()

    def __init__(self, items: Iterable["Sexp"] = ()):
        object.__setattr__(self, "items", tuple(items))

    def to_string(self) -> str:
        return "(" + " ".join(item.to_string() for item in self.items) + ")"

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return len(self.items)


Sexp = Union[Atom, SexpList]


def is_sexp(value: object) -> bool:
    return isinstance(value, (Atom, SexpList))


def sexp_to_python(sexp: Sexp):
    """Nested lists of strings, the shape tests and JSON output use."""
    if isinstance(sexp, Atom):
        return sexp.value
    return [sexp_to_python(item) for item in sexp.items]
