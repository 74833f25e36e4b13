"""Token -> Atom classification.

Priority (case-insensitive for keywords):
  yes / true  -> Bool(True)
  no / false  -> Bool(False)
  [+-]digits  -> Int   (int64 range only; larger values fall through to Float)
  float       -> Float (decimal / exponent notation, inf, nan)
  otherwise   -> Text  (token kept as-is)

Integers are tried before floats so integral tokens keep their exact value.
"""

from __future__ import annotations

from typing import List

from paravision_params.models.atoms import Atom, Bool, Float, Int, Text
from paravision_params.models.conversions import FLOAT_RE, INT_RE


_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

_TRUE_WORDS = {"yes", "true"}
_FALSE_WORDS = {"no", "false"}


def parse_atom(token: str) -> Atom:
    t = token.strip()
    tl = t.lower()
    if tl in _TRUE_WORDS:
        return Bool(True)
    if tl in _FALSE_WORDS:
        return Bool(False)

    if INT_RE.fullmatch(t):
        i = int(t)
        if _INT64_MIN <= i <= _INT64_MAX:
            return Int(i)

    if FLOAT_RE.fullmatch(t):
        return Float(float(t))

    return Text(t)


def parse_atoms(line: str) -> List[Atom]:
    """Split a line on whitespace and classify each token."""
    return [parse_atom(tok) for tok in line.split()]
