"""Errors that remember where they were created."""

from __future__ import annotations

import inspect
import os


class LazyError(Exception):
    """An error wrapped together with the source location that created it."""

    def __init__(self, error: BaseException, location: str | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.location = location

    def __str__(self) -> str:
        if self.location is None:
            return str(self.error)
        return f"<{self.location}> {self.error}"

    def unwrap(self) -> BaseException:
        """Return the wrapped error."""
        return self.error


class _FormattedError(Exception):
    """A formatted message that may wrap another error."""

    def __init__(self, message: str, wrapped: BaseException | None) -> None:
        super().__init__(message)
        self.message = message
        self.wrapped = wrapped
        self.__cause__ = wrapped

    def __str__(self) -> str:
        return self.message

    def unwrap(self) -> BaseException | None:
        return self.wrapped


def _location() -> str:
    """Describe the frame that called the public constructor function."""
    frame = inspect.currentframe()
    for _ in range(2):
        frame = frame.f_back if frame is not None else None
    if frame is None:
        return "unknown"

    code = frame.f_code
    if not code.co_filename:
        return "unknown"

    filename = os.path.basename(code.co_filename)
    module = os.path.splitext(filename)[0]
    function = f"{module}.{code.co_name}" if module else code.co_name
    return f"{filename}:{frame.f_lineno} {function}"


def new(message: str) -> LazyError:
    """Create a new error with the given message and the caller's location."""
    return LazyError(Exception(message), _location())


def wrap(err: BaseException) -> LazyError:
    """Wrap an existing error, recording the caller's location."""
    if err is None:
        raise TypeError("err is None")
    return LazyError(err, _location())


def errorf(template: str, *args: object) -> LazyError:
    """Format a message with ``str.format`` and record the caller's location.

    The first exception among ``args`` becomes the wrapped error.
    """
    message = template.format(*args)
    wrapped = next((arg for arg in args if isinstance(arg, BaseException)), None)
    return LazyError(_FormattedError(message, wrapped), _location())