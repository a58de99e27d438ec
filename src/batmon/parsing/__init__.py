"""Tolerant parsing helpers shared by the probes."""

from batmon.parsing.fields import (
    FieldKind,
    FieldSpec,
    KeyValueScanner,
    ScanResult,
    dig,
    extract_int,
    extract_str,
)

__all__ = [
    "FieldKind",
    "FieldSpec",
    "KeyValueScanner",
    "ScanResult",
    "dig",
    "extract_int",
    "extract_str",
]
