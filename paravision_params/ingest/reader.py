from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from paravision_params.errors import (
    ExcessTokensError,
    IncompleteRecordError,
    StrayLineError,
)
from paravision_params.ingest import pending
from paravision_params.ingest.records import (
    COMMENT_MARKER,
    DimsRecord,
    MetaRecord,
    ScalarRecord,
    classify_record,
)
from paravision_params.models.store import ParamStore
from paravision_params.models.values import Scalar, Value


@dataclass(frozen=True)
class ReaderConfig:
    """
    Reader configuration for ParaVision / JCAMP-DX parameter files.

    strict_stray_lines:
      - False: a content line outside any record is ignored (a warning is recorded).
      - True: raise StrayLineError.
    strict_excess_tokens:
      - False: tokens beyond the declared element count on the line that
               completes an array are discarded (a warning is recorded).
      - True: raise ExcessTokensError.
    encoding, errors:
      Text decoding used by read_params(). ParaVision writes latin-1 text.
    max_warnings:
      Cap on collected warnings; one summary line is added when exceeded.
    """
    strict_stray_lines: bool = False
    strict_excess_tokens: bool = False
    encoding: str = "latin-1"
    errors: str = "strict"
    max_warnings: int = 200


class _StoreBuilder:
    """Mutable accumulator owned by one parse() call."""

    def __init__(self, max_warnings: int) -> None:
        self.meta: Dict[str, str] = {}
        self.params: Dict[str, Value] = {}
        self.warnings: List[str] = []
        self._max_warnings = int(max_warnings)
        self._dropped = 0

    def warn(self, message: str) -> None:
        if len(self.warnings) < self._max_warnings:
            self.warnings.append(message)
        else:
            self._dropped += 1

    def put_meta(self, key: str, text: str, line_no: int) -> None:
        if key in self.meta:
            self.warn(f"line {line_no}: meta '{key}' redefined, previous value replaced")
        self.meta[key] = text

    def put_param(self, key: str, value: Value, line_no: int) -> None:
        if key in self.params:
            self.warn(f"line {line_no}: parameter '{key}' redefined, previous value replaced")
            # Re-insert so iteration order follows record completion order.
            del self.params[key]
        self.params[key] = value

    def finish(self, source_path: Optional[Path]) -> ParamStore:
        warnings = list(self.warnings)
        if self._dropped:
            warnings.append(f"{self._dropped} further warning(s) suppressed")
        return ParamStore(meta=self.meta, params=self.params, warnings=tuple(warnings), source_path=source_path)


class ParavisionReader:
    """
    Streaming reader for ParaVision parameter files (acqp, method, reco, ...).

    One pass, one line of lookahead: the line after a dims header decides
    whether the record is a ``<string>`` or array data. Array records close as
    soon as ``prod(dims)`` atoms have been read.

    HARD REQUIREMENT:
      - an unfinished record at end of stream raises IncompleteRecordError;
        no partial store is ever returned
    """

    def __init__(self, config: Optional[ReaderConfig] = None):
        self.config = config or ReaderConfig()

    def read(self, file_path: str | Path) -> ParamStore:
        path = Path(file_path).expanduser().resolve()
        if not path.exists():
            raise FileNotFoundError(str(path))
        cfg = self.config
        with path.open("r", encoding=cfg.encoding, errors=cfg.errors) as fh:
            return self.parse(fh, source_path=path)

    def parse(self, stream: Iterable[str], *, source_path: Optional[Path] = None) -> ParamStore:
        cfg = self.config
        out = _StoreBuilder(cfg.max_warnings)
        state: pending.PendingState = pending.IDLE
        line_no = 0
        open_line = 0

        for raw_line in stream:
            line_no += 1
            s = raw_line.rstrip("\r\n").strip()
            if not s or s.startswith(COMMENT_MARKER):
                continue

            if not isinstance(state, pending.Idle):
                step = pending.advance(state, s)
                self._apply_step(step, out, line_no)
                state = step.state
                continue

            rec = classify_record(s)
            if rec is None:
                if cfg.strict_stray_lines:
                    raise StrayLineError(f"content outside any record: {s[:60]!r}", line_no=line_no)
                out.warn(f"line {line_no}: ignored content outside any record: {s[:60]!r}")
                continue

            if isinstance(rec, MetaRecord):
                out.put_meta(rec.key, rec.text, line_no)
            elif isinstance(rec, ScalarRecord):
                out.put_param(rec.key, Scalar(rec.atom), line_no)
            elif isinstance(rec, DimsRecord):
                step = pending.start(rec.key, rec.dims)
                self._apply_step(step, out, line_no)
                state = step.state
                open_line = line_no

        if isinstance(state, pending.AwaitingKind):
            raise IncompleteRecordError(state.key, state.dims, n_items=0, line_no=open_line)
        if isinstance(state, pending.AwaitingItems):
            raise IncompleteRecordError(state.key, state.dims, n_items=len(state.items), line_no=open_line)

        return out.finish(source_path)

    def _apply_step(self, step: pending.Step, out: _StoreBuilder, line_no: int) -> None:
        if step.discarded and self.config.strict_excess_tokens:
            key = step.completed[0] if step.completed else "?"
            raise ExcessTokensError(
                f"'{key}': {step.discarded} token(s) beyond the declared element count",
                line_no=line_no,
            )
        for note in step.notes:
            out.warn(f"line {line_no}: {note}")
        if step.completed is not None:
            key, value = step.completed
            out.put_param(key, value, line_no)


def parse(stream: Iterable[str], config: Optional[ReaderConfig] = None) -> ParamStore:
    """Parse an iterable of text lines (open file, io.StringIO, list of str)."""
    return ParavisionReader(config).parse(stream)


def parse_text(text: str, config: Optional[ReaderConfig] = None) -> ParamStore:
    # Split on \n only (a trailing \r is stripped per line); str.splitlines()
    # would also split on \x85, a valid latin-1 character.
    return ParavisionReader(config).parse(io.StringIO(text))


def read_params(file_path: str | Path, config: Optional[ReaderConfig] = None) -> ParamStore:
    """Read a parameter file such as ``<scan>/acqp`` or ``<scan>/pdata/1/reco``."""
    return ParavisionReader(config).read(file_path)
