"""Equality of BSON values, as needed when comparing documents in tests."""

from __future__ import annotations

import datetime
import difflib
import math
from typing import Any

from bson import json_util
from bson.binary import Binary
from bson.int64 import Int64
from bson.objectid import ObjectId
from bson.regex import Regex
from bson.timestamp import Timestamp


def equal(v1: Any, v2: Any) -> bool:
    """Compare two BSON values.

    Documents must have the same keys in the same order, NaNs are equal to
    each other and datetimes are compared as instants. Integers of different
    BSON widths, and booleans and integers, are never equal.
    Raises ``TypeError`` if ``v1`` is not a supported BSON value.
    """
    if isinstance(v1, dict):
        return isinstance(v2, dict) and _equal_documents(v1, v2)
    if isinstance(v1, list):
        return isinstance(v2, list) and _equal_arrays(v1, v2)
    return _equal_scalars(v1, v2)


def _equal_documents(d1: dict[str, Any], d2: dict[str, Any]) -> bool:
    if list(d1) != list(d2):
        return False
    return all(equal(d1[key], d2[key]) for key in d1)


def _equal_arrays(a1: list[Any], a2: list[Any]) -> bool:
    if len(a1) != len(a2):
        return False
    return all(equal(e1, e2) for e1, e2 in zip(a1, a2))


def _kind(value: Any) -> str | None:
    """Return the BSON scalar kind of ``value``, or ``None`` if unsupported."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, Int64):
        return "int64"
    if isinstance(value, int):
        return "int32"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bytes):
        return "binary"
    if isinstance(value, ObjectId):
        return "objectId"
    if isinstance(value, datetime.datetime):
        return "datetime"
    if isinstance(value, Regex):
        return "regex"
    if isinstance(value, Timestamp):
        return "timestamp"
    return None


def _binary_parts(value: bytes) -> tuple[int, bytes]:
    subtype = value.subtype if isinstance(value, Binary) else 0
    return subtype, bytes(value)


def _instant(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def _equal_scalars(v1: Any, v2: Any) -> bool:
    kind = _kind(v1)
    if kind is None:
        raise TypeError(f"unhandled types {type(v1).__name__}, {type(v2).__name__}")
    if _kind(v2) != kind:
        return False

    if kind == "null":
        return True
    if kind == "double":
        if math.isnan(v1):
            return math.isnan(v2)
        return v1 == v2
    if kind == "binary":
        return _binary_parts(v1) == _binary_parts(v2)
    if kind == "datetime":
        return _instant(v1) == _instant(v2)
    if kind == "regex":
        return v1.pattern == v2.pattern and v1.flags == v2.flags
    return v1 == v2


def _marshal(value: Any) -> str:
    return json_util.dumps(value, json_options=json_util.CANONICAL_JSON_OPTIONS)


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    lines = [line + "\n" for line in lines[:-1]] + [lines[-1]]
    lines[-1] += "\n"
    return lines


def diff_values(expected: Any, actual: Any) -> tuple[str, str, str]:
    """Return readable forms of both values and a unified diff between them."""
    expected_s = _marshal(expected)
    actual_s = _marshal(actual)
    diff = "".join(
        difflib.unified_diff(
            _split_lines(expected_s),
            _split_lines(actual_s),
            fromfile="expected",
            tofile="actual",
            n=1,
        )
    )
    return expected_s, actual_s, diff


def assert_equal(expected: Any, actual: Any) -> bool:
    """Raise ``AssertionError`` with a diff unless the values are equal."""
    if equal(expected, actual):
        return True
    expected_s, actual_s, diff = diff_values(expected, actual)
    raise AssertionError(
        f"Not equal: \nexpected: {expected_s}\nactual  : {actual_s}\n{diff}"
    )


def assert_not_equal(expected: Any, actual: Any) -> bool:
    """Raise ``AssertionError`` if the values are equal."""
    if not equal(expected, actual):
        return True
    expected_s, actual_s, diff = diff_values(expected, actual)
    raise AssertionError(
        f"Unexpected equal: \nexpected: {expected_s}\nactual  : {actual_s}\n{diff}"
    )