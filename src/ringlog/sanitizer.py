"""Payload sanitizer: turns arbitrary input into a JSON-safe value.

Policy, in priority order:
- `None` payload -> `{}`.
- Strings longer than `MAX_STRING_LENGTH` are cut and suffixed with `...`.
- Mappings and sequences are sanitized recursively.
- Any reference cycle anywhere replaces the *whole* payload with `SERIALIZATION_FAILED`.
- Values without a JSON representation are dropped from mappings and become
  `None` inside sequences.
- Non-finite floats become `None`.
- Anything unexpected also yields `SERIALIZATION_FAILED`; `sanitize` never raises.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import math
import types
import uuid
from collections import deque
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

MAX_STRING_LENGTH = 1000
ELLIPSIS = "..."

SERIALIZATION_FAILED: dict[str, str] = {"error": "serialization failed"}


class ValueKind(enum.Enum):
    """Closed classification of an input value, decided once per value."""

    ABSENT = "absent"
    PRIMITIVE = "primitive"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    UNREPRESENTABLE = "unrepresentable"


class CycleDetected(Exception):
    """Raised internally when a value is reached again on the active path."""


# Marker for values that must be dropped from mappings / nulled in sequences.
_OMIT = object()

_SEQUENCE_TYPES = (list, tuple, set, frozenset, deque)
_UNREPRESENTABLE_TYPES = (types.FunctionType, types.BuiltinFunctionType, types.MethodType, types.ModuleType, type)


def classify(value: Any) -> ValueKind:
    """Classify `value` into one of the `ValueKind` variants."""
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (bool, int, float)):
        return ValueKind.PRIMITIVE
    if isinstance(value, (datetime, date, time, enum.Enum, Decimal, uuid.UUID, PurePath, bytes, bytearray)):
        return ValueKind.PRIMITIVE
    if isinstance(value, _UNREPRESENTABLE_TYPES) or callable(value):
        return ValueKind.UNREPRESENTABLE
    if isinstance(value, Mapping) or isinstance(value, BaseModel):
        return ValueKind.MAPPING
    if dataclasses.is_dataclass(value):
        return ValueKind.MAPPING
    if isinstance(value, _SEQUENCE_TYPES):
        return ValueKind.SEQUENCE
    if hasattr(value, "__dict__"):
        # Plain objects serialize as their public attributes.
        return ValueKind.MAPPING
    return ValueKind.UNREPRESENTABLE


def truncate(text: str) -> str:
    """Cut `text` to `MAX_STRING_LENGTH` characters plus an ellipsis marker."""
    if len(text) > MAX_STRING_LENGTH:
        return text[:MAX_STRING_LENGTH] + ELLIPSIS
    return text


def _primitive(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        inner = value.value
        if isinstance(inner, str):
            return truncate(inner)
        return _primitive(inner) if isinstance(inner, (bool, int, float)) else truncate(str(inner))
    if isinstance(value, float):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, (bool, int)):
        return value
    if isinstance(value, (datetime, date, time)):
        return truncate(value.isoformat())
    if isinstance(value, Decimal):
        return _primitive(float(value))
    if isinstance(value, (bytes, bytearray)):
        return truncate(bytes(value).decode("utf-8", errors="replace"))
    return truncate(str(value))


def _mapping_items(value: Any) -> list[tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, BaseModel):
        # Shallow on purpose: nested values still go through cycle tracking.
        return [(name, getattr(value, name)) for name in type(value).model_fields]
    if dataclasses.is_dataclass(value):
        return [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
    return [(k, v) for k, v in vars(value).items() if not k.startswith("_")]


def _key(key: Any) -> Any:
    """Convert a mapping key the way `json` does; unsupported keys are dropped."""
    if isinstance(key, str):
        return key
    if key is True:
        return "true"
    if key is False:
        return "false"
    if key is None:
        return "null"
    if isinstance(key, int):
        return str(int(key))
    if isinstance(key, float):
        if math.isnan(key):
            return "NaN"
        if math.isinf(key):
            return "Infinity" if key > 0 else "-Infinity"
        return repr(float(key))
    return _OMIT


class _Traversal:
    """Depth-first walk carrying the set of ids on the active recursion path."""

    def __init__(self) -> None:
        self._path: set[int] = set()

    def visit(self, value: Any) -> Any:
        kind = classify(value)
        if kind is ValueKind.ABSENT:
            return None
        if kind is ValueKind.STRING:
            return truncate(value)
        if kind is ValueKind.PRIMITIVE:
            return _primitive(value)
        if kind is ValueKind.UNREPRESENTABLE:
            return _OMIT

        marker = id(value)
        if marker in self._path:
            raise CycleDetected(type(value).__name__)
        self._path.add(marker)
        try:
            if kind is ValueKind.MAPPING:
                return self._visit_mapping(value)
            return self._visit_sequence(value)
        finally:
            self._path.discard(marker)

    def _visit_mapping(self, value: Any) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for raw_key, raw_value in _mapping_items(value):
            key = _key(raw_key)
            if key is _OMIT:
                continue
            item = self.visit(raw_value)
            if item is _OMIT:
                continue
            out[key] = item
        return out

    def _visit_sequence(self, value: Any) -> list[Any]:
        out: list[Any] = []
        for raw in value:
            item = self.visit(raw)
            out.append(None if item is _OMIT else item)
        return out


def sanitize(value: Any) -> Any:
    """Return a JSON-safe copy of `value`. Never raises."""
    if value is None:
        return {}
    try:
        result = _Traversal().visit(value)
    except CycleDetected as exc:
        logger.debug("Cyclic payload replaced with sentinel (cycle through %s)", exc)
        return dict(SERIALIZATION_FAILED)
    except Exception:  # noqa: BLE001 - the logging hot path must never raise
        logger.debug("Payload sanitization failed", exc_info=True)
        return dict(SERIALIZATION_FAILED)
    if result is _OMIT:
        return dict(SERIALIZATION_FAILED)
    return result
