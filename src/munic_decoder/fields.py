"""
Read-or-default helpers for payload fields.

Each read is isolated: a missing key or a value of the wrong JSON type
resolves to the field's sentinel and never affects the other fields.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, TypeVar
import math

from .models import BAD_STRING, BAD_VAL, EPOCH

T = TypeVar("T")

TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class FieldTypeError(ValueError):
    """
    Raised by readers when a value has the wrong JSON type.
    """


def read_or_default(
    container: Mapping[str, Any],
    key: str,
    reader: Callable[[Any], T],
    default: T,
) -> T:
    if key not in container:
        return default
    try:
        return reader(container[key])
    except (ValueError, OverflowError):
        return default


def as_int(value: Any) -> int:
    # bool is an int subclass but true/false are not JSON numbers.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldTypeError(f"not a number: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise FieldTypeError(f"not a finite number: {value!r}")
    result = int(value)
    if not INT64_MIN <= result <= INT64_MAX:
        raise FieldTypeError(f"outside the 64-bit range: {value!r}")
    return result


def as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise FieldTypeError(f"not a string: {value!r}")
    return value


def as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldTypeError(f"not a number: {value!r}")
    result = float(value)
    if not math.isfinite(result):
        raise FieldTypeError(f"not a finite number: {value!r}")
    return result


def parse_time(value: str) -> datetime:
    return datetime.strptime(value, TIME_FORMAT).replace(tzinfo=timezone.utc)


def read_int(container: Mapping[str, Any], key: str) -> int:
    return read_or_default(container, key, as_int, BAD_VAL)


def read_str(container: Mapping[str, Any], key: str) -> str:
    return read_or_default(container, key, as_str, BAD_STRING)


def read_time(container: Mapping[str, Any], key: str) -> datetime:
    raw = read_str(container, key)
    if raw == BAD_STRING:
        return EPOCH
    try:
        return parse_time(raw)
    except ValueError:
        return EPOCH


def _as_location(value: Any) -> tuple[float, float]:
    if not isinstance(value, list) or len(value) != 2:
        raise FieldTypeError(f"not a [lon, lat] pair: {value!r}")
    return as_float(value[0]), as_float(value[1])


def read_location(container: Mapping[str, Any], key: str) -> tuple[float, float] | None:
    return read_or_default(container, key, _as_location, None)


def _as_mapping(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise FieldTypeError(f"not an object: {value!r}")
    return dict(value)


def read_mapping(container: Mapping[str, Any], key: str) -> dict[str, Any]:
    return read_or_default(container, key, _as_mapping, {})
