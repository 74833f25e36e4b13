from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, TypeVar, Union

import numpy as np

from paravision_params.models.atoms import Atom, Bool, Int, Text
from paravision_params.models.conversions import (
    atom_to_bool,
    atom_to_float,
    atom_to_int,
    atom_to_uint,
)


T = TypeVar("T")


class _ValueBase(ABC):
    """Typed accessors shared by all value variants.

    Each ``as_*`` accessor returns a list with one entry per atom, or None
    when the value is a :class:`Str` (text is never silently coerced).
    Unparsable Text atoms raise ConversionError.
    """

    kind: str = ""

    @abstractmethod
    def atoms(self) -> Optional[Tuple[Atom, ...]]:
        """Atoms behind the value, or None when it holds text only."""

    def _convert(self, fn: Callable[[Atom], T]) -> Optional[List[T]]:
        atoms = self.atoms()
        if atoms is None:
            return None
        return [fn(a) for a in atoms]

    def as_uints(self) -> Optional[List[int]]:
        return self._convert(atom_to_uint)

    def as_ints(self) -> Optional[List[int]]:
        return self._convert(atom_to_int)

    def as_floats(self) -> Optional[List[float]]:
        return self._convert(atom_to_float)

    def as_bools(self) -> Optional[List[bool]]:
        return self._convert(atom_to_bool)

    def as_uint(self) -> Optional[int]:
        """Scalar-only unsigned accessor; None for arrays and strings."""
        return None

    def to_numpy(self, dtype: Any = None) -> Optional[np.ndarray]:
        return None


@dataclass(frozen=True)
class Scalar(_ValueBase):
    atom: Atom
    kind = "scalar"

    def atoms(self) -> Tuple[Atom, ...]:
        return (self.atom,)

    def as_uint(self) -> Optional[int]:
        return atom_to_uint(self.atom)

    def to_numpy(self, dtype: Any = None) -> np.ndarray:
        """0-d array holding the converted atom."""
        return _atoms_to_numpy((self.atom,), (), dtype)

    def __str__(self) -> str:
        return str(self.atom)


@dataclass(frozen=True)
class Array(_ValueBase):
    """
    Array value declared by a dims header.

    dims: declared shape, non-empty, non-negative entries.
    items: flattened atoms in file order (C order); len(items) == prod(dims).
    """
    dims: Tuple[int, ...]
    items: Tuple[Atom, ...]
    kind = "array"

    def __post_init__(self) -> None:
        dims = tuple(int(d) for d in self.dims)
        items = tuple(self.items)
        if not dims:
            raise ValueError("Array dims must be non-empty")
        if any(d < 0 for d in dims):
            raise ValueError(f"Array dims must be non-negative: {dims}")
        n = math.prod(dims)
        if len(items) != n:
            raise ValueError(f"Array has {len(items)} items but dims {dims} require {n}")
        object.__setattr__(self, "dims", dims)
        object.__setattr__(self, "items", items)

    @property
    def size(self) -> int:
        return len(self.items)

    def atoms(self) -> Tuple[Atom, ...]:
        return self.items

    def to_numpy(self, dtype: Any = None) -> np.ndarray:
        """Array reshaped to ``dims`` (C order)."""
        return _atoms_to_numpy(self.items, self.dims, dtype)

    def __str__(self) -> str:
        return "[" + ",".join(str(a) for a in self.items) + "]"


@dataclass(frozen=True)
class Str(_ValueBase):
    """Text found inside one pair of angle brackets, e.g. ``<Spin_Echo>``."""
    text: str
    kind = "str"

    def atoms(self) -> None:
        return None

    def __str__(self) -> str:
        return self.text


Value = Union[Scalar, Array, Str]


def _infer_dtype(atoms: Tuple[Atom, ...]) -> np.dtype:
    """
    Pick the narrowest numpy dtype for a sequence of atoms.

    all Bool -> bool, all Int -> int64, Bool/Int/Float mix -> float64,
    anything containing Text -> object.
    """
    if not atoms:
        return np.dtype(np.float64)
    kinds = {type(a) for a in atoms}
    if Text in kinds:
        return np.dtype(object)
    if kinds == {Bool}:
        return np.dtype(bool)
    if kinds == {Int}:
        return np.dtype(np.int64)
    return np.dtype(np.float64)


def _atoms_to_numpy(atoms: Tuple[Atom, ...], shape: Tuple[int, ...], dtype: Any) -> np.ndarray:
    dt = _infer_dtype(atoms) if dtype is None else np.dtype(dtype)
    if dt == np.dtype(object):
        flat: List[Any] = [a.value for a in atoms]
    elif dt.kind == "b":
        flat = [atom_to_bool(a) for a in atoms]
    elif dt.kind == "u":
        flat = [atom_to_uint(a) for a in atoms]
    elif dt.kind == "i":
        flat = [atom_to_int(a) for a in atoms]
    elif dt.kind in "fc":
        flat = [atom_to_float(a) for a in atoms]
    else:
        raise TypeError(f"unsupported dtype for parameter values: {dt}")
    arr = np.empty(len(flat), dtype=dt)
    arr[:] = flat
    return arr.reshape(shape)
