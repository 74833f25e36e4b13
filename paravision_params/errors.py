"""Exceptions raised while parsing parameter files and converting values.

All of them derive from :class:`ValueError` so callers that already guard
reader calls with ``except ValueError`` keep working.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple


class ParamParseError(ValueError):
    """Structural error in a parameter file.

    line_no is the 1-based physical line number where the problem was
    detected, or None when it is not tied to one line.
    """

    def __init__(self, message: str, *, line_no: Optional[int] = None) -> None:
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class IncompleteRecordError(ParamParseError):
    """End of stream reached while an array or string record was still open."""

    def __init__(
        self,
        key: str,
        dims: Sequence[int],
        *,
        n_items: int = 0,
        line_no: Optional[int] = None,
    ) -> None:
        self.key = key
        self.dims: Tuple[int, ...] = tuple(int(d) for d in dims)
        self.n_items = int(n_items)
        dims_txt = ", ".join(str(d) for d in self.dims)
        super().__init__(
            f"unexpected end of stream in record '{key}' with dims ({dims_txt}): "
            f"got {self.n_items} item(s)",
            line_no=line_no,
        )


class StrayLineError(ParamParseError):
    """Content line outside any record (strict mode only)."""


class ExcessTokensError(ParamParseError):
    """More tokens than the declared element count (strict mode only)."""


class ConversionError(ValueError):
    """A stored atom cannot be converted to the requested primitive type."""
