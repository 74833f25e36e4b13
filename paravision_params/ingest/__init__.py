"""Ingest package - parameter file reading.

This package handles:
- Classifying tokens into typed atoms (atom_parser)
- Classifying record lines: meta, scalar parameter, dims header (records)
- Resolving dims headers from the following line(s) (pending)
- Driving the line loop and building the ParamStore (reader)

Key classes:
- ParavisionReader: reads a file or line stream into a ParamStore
- ReaderConfig: strictness and decoding options

Design principle:
- Single pass, one line of lookahead
- Incomplete records are errors, never truncated entries
"""
from .reader import ParavisionReader, ReaderConfig, parse, parse_text, read_params

__all__ = [
    "ParavisionReader",
    "ReaderConfig",
    "parse",
    "parse_text",
    "read_params",
]
