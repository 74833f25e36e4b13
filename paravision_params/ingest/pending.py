"""Continuation state machine for records declared with a dims header.

After ``##$KEY=( d1, d2, ... )`` the value is on the following line(s).
There is no terminator: a string is one ``<...>`` line, an array is complete
once ``prod(dims)`` atoms have been collected, however the tokens are spread
across lines.

States
------
Idle
    nothing pending
AwaitingKind(key, dims)
    the next content line decides string vs. array
AwaitingItems(key, dims, needed, items)
    array partially collected

States are immutable; :func:`advance` returns the next state together with
the completed ``(key, value)`` if the line finished the record.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from paravision_params.ingest.atom_parser import parse_atoms
from paravision_params.ingest.records import RECORD_MARKER, parse_angle_string
from paravision_params.models.atoms import Atom
from paravision_params.models.values import Array, Str, Value


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingKind:
    key: str
    dims: Tuple[int, ...]

    @property
    def needed(self) -> int:
        return math.prod(self.dims)


@dataclass(frozen=True)
class AwaitingItems:
    key: str
    dims: Tuple[int, ...]
    needed: int
    items: Tuple[Atom, ...]


PendingState = Union[Idle, AwaitingKind, AwaitingItems]

IDLE = Idle()


@dataclass(frozen=True)
class Step:
    """
    Result of feeding one line to the state machine.

    state: next state
    completed: (key, value) when the line finished a record, else None
    discarded: number of tokens dropped beyond the declared element count
    notes: diagnostics for the reader's warning list
    """
    state: PendingState
    completed: Optional[Tuple[str, Value]] = None
    discarded: int = 0
    notes: Tuple[str, ...] = ()


def start(key: str, dims: Tuple[int, ...]) -> Step:
    """Enter the machine for a freshly read dims header.

    The next content line always decides string vs. array, even for a
    zero-element shape.
    """
    return Step(state=AwaitingKind(key=key, dims=dims))


def _collect(key: str, dims: Tuple[int, ...], needed: int, items: Tuple[Atom, ...], notes: List[str]) -> Step:
    if len(items) >= needed:
        extra = len(items) - needed
        if extra:
            notes.append(f"'{key}': discarded {extra} token(s) beyond declared dims {dims}")
        return Step(
            state=IDLE,
            completed=(key, Array(dims=dims, items=items[:needed])),
            discarded=extra,
            notes=tuple(notes),
        )
    return Step(
        state=AwaitingItems(key=key, dims=dims, needed=needed, items=items),
        notes=tuple(notes),
    )


def advance(state: PendingState, line: str) -> Step:
    """Feed one trimmed content line to a non-idle state."""
    notes: List[str] = []

    if isinstance(state, AwaitingKind):
        text = parse_angle_string(line)
        if text is not None:
            return Step(state=IDLE, completed=(state.key, Str(text)))
        if line.startswith(RECORD_MARKER):
            notes.append(f"'{state.key}': record marker in continuation line, read as array data")
        chunk = tuple(parse_atoms(line))
        return _collect(state.key, state.dims, state.needed, chunk, notes)

    if isinstance(state, AwaitingItems):
        if line.startswith(RECORD_MARKER):
            notes.append(f"'{state.key}': record marker in continuation line, read as array data")
        items = state.items + tuple(parse_atoms(line))
        return _collect(state.key, state.dims, state.needed, items, notes)

    raise ValueError(f"advance() called in state {state!r}")
