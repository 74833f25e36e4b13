from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import pandas as pd

from paravision_params.models.conversions import ascii_upper
from paravision_params.models.values import Array, Value


@dataclass(frozen=True, eq=False)
class ParamStore:
    """
    Read-only snapshot of one parsed parameter file.

    meta:
        ``##KEY=VALUE`` records. Keys are upper-cased, values are the trimmed
        raw text (no type inference).
    params:
        ``##$KEY=VALUE`` records. Keys are kept exactly as written.
        Iteration order is the order in which records completed.
    warnings:
        Non-fatal diagnostics collected while parsing.
    source_path:
        File the store was read from, if any.
    """
    meta: Mapping[str, str]
    params: Mapping[str, Value]
    warnings: Tuple[str, ...] = ()
    source_path: Optional[Path] = None

    def __post_init__(self) -> None:
        # Snapshot: copy and freeze so later changes to the source dicts do not leak in.
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Value:
        return self.params[key]

    def __contains__(self, key: object) -> bool:
        return key in self.params

    def __iter__(self) -> Iterator[str]:
        return iter(self.params)

    def __len__(self) -> int:
        return len(self.params)

    def get(self, key: str, default: Optional[Value] = None) -> Optional[Value]:
        return self.params.get(key, default)

    def get_meta(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Meta lookup; keys are stored upper-cased so the lookup is case-insensitive."""
        return self.meta.get(ascii_upper(key.strip()), default)

    # ------------------------------------------------------------------
    # Typed helpers (None when the key is missing or holds a string)
    # ------------------------------------------------------------------

    def uints(self, key: str) -> Optional[List[int]]:
        v = self.params.get(key)
        return None if v is None else v.as_uints()

    def ints(self, key: str) -> Optional[List[int]]:
        v = self.params.get(key)
        return None if v is None else v.as_ints()

    def floats(self, key: str) -> Optional[List[float]]:
        v = self.params.get(key)
        return None if v is None else v.as_floats()

    def bools(self, key: str) -> Optional[List[bool]]:
        v = self.params.get(key)
        return None if v is None else v.as_bools()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_frame(self) -> pd.DataFrame:
        """One row per parameter: key, kind, dims, n_items, text."""
        rows: List[Dict[str, object]] = []
        for key, v in self.params.items():
            if isinstance(v, Array):
                dims: Optional[Tuple[int, ...]] = v.dims
                n_items = v.size
            else:
                dims = None
                n_items = 1
            rows.append({"key": key, "kind": v.kind, "dims": dims, "n_items": n_items, "text": str(v)})
        return pd.DataFrame(rows, columns=["key", "kind", "dims", "n_items", "text"])
