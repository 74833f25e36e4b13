from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Bool:
    """Boolean keyword token (Yes/No/True/False, any case)."""
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Int:
    """Base-10 signed integer token (fits in int64)."""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Float:
    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class Text:
    """Fallback for tokens that are neither boolean nor numeric (e.g. ``Spin_Echo``)."""
    value: str

    def __str__(self) -> str:
        return self.value


Atom = Union[Bool, Int, Float, Text]

ATOM_TYPES = (Bool, Int, Float, Text)
