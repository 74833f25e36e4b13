"""Per-atom conversions to Python primitives.

Rules
-----
- Bool converts to 1 / 0 (1.0 / 0.0 for floats).
- Int and Float convert by ordinary numeric widening/narrowing; float to
  integer truncates toward zero.
- Text is parsed with the target type's own grammar; failure raises
  :class:`~paravision_params.errors.ConversionError`.
- Boolean target: numbers are True iff ``abs(x) > 0``; text must be a
  boolean literal.
"""

from __future__ import annotations

import math
import re
import string

from paravision_params.errors import ConversionError
from paravision_params.models.atoms import Atom, Bool, Float, Int, Text


INT_RE = re.compile(r"[+-]?[0-9]+")
# ASCII only: Python's int()/float() also accept "1_000" and non-ASCII digits,
# which are not numbers in parameter files.
FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

_BOOL_TRUE = {"true", "yes"}
_BOOL_FALSE = {"false", "no"}


def ascii_upper(text: str) -> str:
    """Upper-case ASCII letters only; other characters are kept as-is."""
    return text.translate(_ASCII_UPPER)


def parse_int_text(text: str) -> int:
    if not INT_RE.fullmatch(text):
        raise ConversionError(f"cannot parse {text!r} as integer")
    return int(text)


def parse_float_text(text: str) -> float:
    if not FLOAT_RE.fullmatch(text):
        raise ConversionError(f"cannot parse {text!r} as float")
    return float(text)


def parse_bool_text(text: str) -> bool:
    tl = text.strip().lower()
    if tl in _BOOL_TRUE:
        return True
    if tl in _BOOL_FALSE:
        return False
    raise ConversionError(f"cannot parse {text!r} as bool")


def _truncate(x: float) -> int:
    if not math.isfinite(x):
        raise ConversionError(f"cannot convert non-finite float {x!r} to integer")
    return int(x)


def atom_to_int(atom: Atom) -> int:
    if isinstance(atom, Bool):
        return 1 if atom.value else 0
    if isinstance(atom, Int):
        return atom.value
    if isinstance(atom, Float):
        return _truncate(atom.value)
    if isinstance(atom, Text):
        return parse_int_text(atom.value)
    raise TypeError(f"not an atom: {atom!r}")


def atom_to_uint(atom: Atom) -> int:
    """Like :func:`atom_to_int`, but negative results are rejected."""
    v = atom_to_int(atom)
    if v < 0:
        raise ConversionError(f"cannot convert negative value {atom} to unsigned integer")
    return v


def atom_to_float(atom: Atom) -> float:
    if isinstance(atom, Bool):
        return 1.0 if atom.value else 0.0
    if isinstance(atom, (Int, Float)):
        return float(atom.value)
    if isinstance(atom, Text):
        return parse_float_text(atom.value)
    raise TypeError(f"not an atom: {atom!r}")


def atom_to_bool(atom: Atom) -> bool:
    if isinstance(atom, Bool):
        return atom.value
    if isinstance(atom, (Int, Float)):
        return abs(atom.value) > 0
    if isinstance(atom, Text):
        return parse_bool_text(atom.value)
    raise TypeError(f"not an atom: {atom!r}")

