"""Access to values inside documents and arrays by a path of keys and indexes."""

from __future__ import annotations

import datetime
from typing import Any


def _index(key: str, array: list[Any]) -> int:
    try:
        index = int(key)
    except ValueError as exc:
        raise ValueError(f"invalid array index {key!r}") from exc
    if index < 0 or index >= len(array):
        raise IndexError(f"index {index} is out of bounds [0-{len(array)})")
    return index


def _step(container: Any, key: str) -> Any:
    if isinstance(container, dict):
        if key not in container:
            raise KeyError(key)
        return container[key]
    if isinstance(container, list):
        return container[_index(key, container)]
    raise TypeError(f"can't access {type(container).__name__} by path {key!r}")


def get_by_path(comp: dict[str, Any] | list[Any], *path: str) -> Any:
    """Return the value at a path of document keys and array indexes."""
    value: Any = comp
    for key in path:
        value = _step(value, key)
    return value


def set_by_path(comp: dict[str, Any] | list[Any], value: Any, *path: str) -> None:
    """Replace the value at a path; the path must exist."""
    if not path:
        raise ValueError("path is empty")

    parent = get_by_path(comp, *path[:-1])
    last = path[-1]
    _step(parent, last)
    if isinstance(parent, dict):
        parent[last] = value
    else:
        parent[_index(last, parent)] = value


def compare_and_set_by_path_num(
    expected: dict[str, Any] | list[Any],
    actual: dict[str, Any] | list[Any],
    delta: float,
    *path: str,
) -> None:
    """Check that two numbers at the same path are within ``delta``.

    Then copy the actual value into ``expected``.
    """
    expected_v = get_by_path(expected, *path)
    actual_v = get_by_path(actual, *path)
    if type(expected_v) is not type(actual_v):
        raise AssertionError(
            f"Object expected to be of type {type(expected_v).__name__}, "
            f"but was {type(actual_v).__name__}"
        )
    if not abs(expected_v - actual_v) <= delta:
        raise AssertionError(
            f"Max difference between {expected_v} and {actual_v} allowed is {delta}"
        )
    set_by_path(expected, actual_v, *path)


def compare_and_set_by_path_time(
    expected: dict[str, Any] | list[Any],
    actual: dict[str, Any] | list[Any],
    delta: datetime.timedelta | float,
    *path: str,
) -> None:
    """Check that two datetimes at the same path are within ``delta``.

    Then copy the actual value into ``expected``.
    """
    if not isinstance(delta, datetime.timedelta):
        delta = datetime.timedelta(seconds=delta)

    expected_v = get_by_path(expected, *path)
    actual_v = get_by_path(actual, *path)
    if type(expected_v) is not type(actual_v):
        raise AssertionError(
            f"Object expected to be of type {type(expected_v).__name__}, "
            f"but was {type(actual_v).__name__}"
        )
    if not isinstance(actual_v, datetime.datetime):
        raise AssertionError(f"Object expected to be a datetime, but was {type(actual_v).__name__}")
    if abs(expected_v - actual_v) > delta:
        raise AssertionError(
            f"Max difference between {expected_v} and {actual_v} allowed is {delta}"
        )
    set_by_path(expected, actual_v, *path)