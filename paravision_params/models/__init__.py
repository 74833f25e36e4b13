from .atoms import Atom, Bool, Float, Int, Text
from .store import ParamStore
from .values import Array, Scalar, Str, Value

__all__ = [
    "Atom",
    "Bool",
    "Float",
    "Int",
    "Text",
    "Array",
    "Scalar",
    "Str",
    "Value",
    "ParamStore",
]
