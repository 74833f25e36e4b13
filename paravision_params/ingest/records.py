"""Classification of a single content line when no record is pending.

Line forms
----------
- ``##KEY=VALUE``   meta record, KEY upper-cased, VALUE kept as trimmed text
- ``##$KEY=VALUE``  parameter record, KEY kept as written
- anything else     stray content (ignored by the reader unless strict)

A parameter VALUE of the form ``( d1, d2, ... )`` is a dims header: the actual
value follows on the next line(s). Any other VALUE is a scalar atom.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from paravision_params.ingest.atom_parser import parse_atom
from paravision_params.models.atoms import Atom
from paravision_params.models.conversions import ascii_upper


RECORD_MARKER = "##"
PARAM_MARKER = "$"
COMMENT_MARKER = "$$"

_DIM_RE = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class MetaRecord:
    key: str
    text: str


@dataclass(frozen=True)
class ScalarRecord:
    key: str
    atom: Atom


@dataclass(frozen=True)
class DimsRecord:
    key: str
    dims: Tuple[int, ...]


Record = Union[MetaRecord, ScalarRecord, DimsRecord]


def split_key_value(s: str) -> Tuple[str, str]:
    """Split once on '='; a missing '=' yields an empty value."""
    k, _, v = s.partition("=")
    return k, v


def parse_dims(value: str) -> Optional[Tuple[int, ...]]:
    """
    Parse ``( 10, 2 )`` / ``(4)`` into a dims tuple.

    Returns None when the text is not a parenthesised, non-empty list of
    non-negative integers. Empty items (``( 4, )``) are skipped.
    """
    v = value.strip()
    if len(v) < 2 or not v.startswith("(") or not v.endswith(")"):
        return None
    items = [t.strip() for t in v[1:-1].split(",")]
    items = [t for t in items if t]
    if not items:
        return None
    if not all(_DIM_RE.fullmatch(t) for t in items):
        return None
    return tuple(int(t) for t in items)


def parse_angle_string(line: str) -> Optional[str]:
    """Text inside ``<...>`` when the whole trimmed line is wrapped in one pair."""
    s = line.strip()
    if len(s) < 2 or not s.startswith("<") or not s.endswith(">"):
        return None
    return s[1:-1]


def classify_record(line: str) -> Optional[Record]:
    """
    Classify one trimmed content line.

    Returns None for lines that are not records.
    """
    if not line.startswith(RECORD_MARKER):
        return None
    rest = line[len(RECORD_MARKER):]

    if not rest.startswith(PARAM_MARKER):
        k, v = split_key_value(rest)
        return MetaRecord(key=ascii_upper(k.strip()), text=v.strip())

    k, v = split_key_value(rest[len(PARAM_MARKER):])
    key = k.strip()
    v = v.strip()

    dims = parse_dims(v)
    if dims is not None:
        return DimsRecord(key=key, dims=dims)
    return ScalarRecord(key=key, atom=parse_atom(v))
