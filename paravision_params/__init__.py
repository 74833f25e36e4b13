"""ParaVision Params -- typed reader for ParaVision / JCAMP-DX parameter files.

Bruker ParaVision stores acquisition, method and reconstruction settings
(``acqp``, ``method``, ``reco``, ``visu_pars`` ...) as JCAMP-DX style text:

    ##TITLE=Parameter List, ParaVision 360 V3.5
    ##$NR=16
    ##$ACQ_size=( 2 )
    128 2
    ##$ACQ_method=( 64 )
    <User:ute3d>

This package provides tools for:
- Streaming a parameter file line by line into a read-only ParamStore
- Resolving multi-line arrays and bracketed strings from a declared shape
- Converting stored values to typed lists and numpy arrays

Key principles:
- Single pass, one line of lookahead, no full-file buffering
- Types are decided once, at parse time, and never re-inferred
- An incomplete record is an error, never a truncated entry

Main subpackages:
- ingest: atom parser, record classifier, continuation state machine, reader
- models: Atom / Value model, typed conversions, ParamStore
"""

from .errors import (
    ConversionError,
    ExcessTokensError,
    IncompleteRecordError,
    ParamParseError,
    StrayLineError,
)
from .ingest.reader import ParavisionReader, ReaderConfig, parse, parse_text, read_params
from .models import Array, Bool, Float, Int, ParamStore, Scalar, Str, Text

__all__ = [
    "Array",
    "Bool",
    "ConversionError",
    "ExcessTokensError",
    "Float",
    "IncompleteRecordError",
    "Int",
    "ParamParseError",
    "ParamStore",
    "ParavisionReader",
    "ReaderConfig",
    "Scalar",
    "Str",
    "StrayLineError",
    "Text",
    "parse",
    "parse_text",
    "read_params",
]
