"""Tolerant field extraction for semi-structured command output.

Both probes pull individual values out of text or JSON whose layout is
not under our control. Every helper here degrades to "not found" rather
than raising: callers turn absence into their documented defaults.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

logger: Final = logging.getLogger(__name__)

# Matches `"Key" = value` as well as the nested `"Key"=value` form ioreg uses
# inside dictionaries. Values opening a nested container are skipped so the
# keys inside them are still visited.
_PAIR_RE: Final = re.compile(r'"(?P<key>[^"]+)"\s*=\s*(?P<value>"[^"]*"|[^,{}()\s]+)')

_TRUE_WORDS: Final = frozenset({"yes", "true"})
_FALSE_WORDS: Final = frozenset({"no", "false"})


def _pair_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf'"{re.escape(key)}"\s*=\s*(?P<value>"[^"]*"|[^,{{}}()\s]+)')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def extract_str(text: str, key: str) -> str | None:
    """Return the value of the first ``"key" = value`` pair in text.

    Args:
        text: Raw command output
        key: Field name, without quotes

    Returns:
        The value with surrounding quotes stripped, or None when absent
    """
    match = _pair_pattern(key).search(text)
    if match is None:
        return None
    return _unquote(match.group("value"))


def extract_int(text: str, key: str) -> int | None:
    """Return the base-10 integer value of a field.

    Args:
        text: Raw command output
        key: Field name, without quotes

    Returns:
        The parsed integer, 0 if the value is present but not an integer,
        or None when the field is absent
    """
    raw = extract_str(text, key)
    if raw is None:
        return None
    return _to_int(raw)


def _to_int(raw: str) -> int:
    try:
        return int(raw, 10)
    except ValueError:
        logger.debug("Non-integer value %r, using 0", raw)
        return 0


def _to_flag(raw: str) -> bool | None:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


class FieldKind(Enum):
    """How a raw field value is converted."""

    STRING = "string"
    INTEGER = "integer"
    FLAG = "flag"


@dataclass(frozen=True)
class FieldSpec:
    """Declares one field the scanner should pick out of the text."""

    key: str
    kind: FieldKind = FieldKind.STRING
    default: Any = None


@dataclass
class ScanResult:
    """Values found by a scan, keyed by field name."""

    values: dict[str, Any] = field(default_factory=dict)
    missing: frozenset[str] = frozenset()

    def get(self, key: str) -> Any:
        return self.values.get(key)


class KeyValueScanner:
    """Scan ``"Key" = value`` text against a declared field table.

    The table states once which fields are read, how each is typed and
    what it defaults to. The first occurrence of a key wins; unknown keys
    are ignored.

    Examples:
        scanner = KeyValueScanner([
            FieldSpec("CurrentCapacity", FieldKind.INTEGER, 0),
            FieldSpec("IsCharging", FieldKind.FLAG, False),
        ])
        result = scanner.scan(output)
        result.get("CurrentCapacity")
    """

    def __init__(self, fields: Iterable[FieldSpec]) -> None:
        self.fields: dict[str, FieldSpec] = {spec.key: spec for spec in fields}

    def scan(self, text: str) -> ScanResult:
        """Extract every declared field from text.

        Args:
            text: Raw command output

        Returns:
            ScanResult holding a value (or default) for every declared field
            and the names of fields that fell back to their default
        """
        raw: dict[str, str] = {}
        for match in _PAIR_RE.finditer(text):
            key = match.group("key")
            if key in self.fields and key not in raw:
                raw[key] = _unquote(match.group("value"))

        values: dict[str, Any] = {}
        missing: set[str] = set()
        for key, spec in self.fields.items():
            converted = self._convert(spec, raw.get(key))
            if converted is None:
                missing.add(key)
                values[key] = spec.default
            else:
                values[key] = converted

        return ScanResult(values=values, missing=frozenset(missing))

    @staticmethod
    def _convert(spec: FieldSpec, raw: str | None) -> Any:
        if raw is None:
            return None
        if spec.kind is FieldKind.INTEGER:
            return _to_int(raw)
        if spec.kind is FieldKind.FLAG:
            return _to_flag(raw)
        return raw


def dig(data: Any, *path: str, default: Any = None) -> Any:
    """Walk nested mappings, returning default on any missing step.

    Args:
        data: Decoded JSON value
        *path: Keys to follow in order
        default: Value returned when a key is missing or a step is not a mapping

    Returns:
        The value at the end of the path, or default
    """
    current = data
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current
