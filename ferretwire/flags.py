"""Flag bit sets used by wire protocol messages."""

from __future__ import annotations

import enum
from collections.abc import Callable

_BITS = 32


def flag_names(value: int, names: Callable[[int], str]) -> list[str]:
    """Return the names of the bits set in ``value``, lowest bit first."""
    return [names(1 << shift) for shift in range(_BITS) if (value >> shift) & 1]


def format_flags(value: int, names: Callable[[int], str]) -> str:
    """Return the set bits of ``value`` as ``[name|name]``."""
    return "[" + "|".join(flag_names(value, names)) + "]"


def _namer(type_name: str, labels: dict[int, str]) -> Callable[[int], str]:
    def name(bit: int) -> str:
        return labels.get(bit, f"{type_name}({bit})")

    return name


class OpMsgFlags(enum.IntFlag):
    """Flags that modify the format and behaviour of OP_MSG."""

    CHECKSUM_PRESENT = 1 << 0
    MORE_TO_COME = 1 << 1
    EXHAUST_ALLOWED = 1 << 16

    def __str__(self) -> str:
        return format_flags(int(self), _namer("OpMsgFlagBit", _OP_MSG_LABELS))


class OpQueryFlags(enum.IntFlag):
    """Flags of OP_QUERY."""

    TAILABLE_CURSOR = 1 << 1
    SLAVE_OK = 1 << 2
    OPLOG_REPLAY = 1 << 3
    NO_CURSOR_TIMEOUT = 1 << 4
    AWAIT_DATA = 1 << 5
    EXHAUST = 1 << 6
    PARTIAL = 1 << 7

    def __str__(self) -> str:
        return format_flags(int(self), _namer("OpQueryFlagBit", _OP_QUERY_LABELS))


class OpReplyFlags(enum.IntFlag):
    """Response flags of OP_REPLY."""

    CURSOR_NOT_FOUND = 1 << 0
    QUERY_FAILURE = 1 << 1
    SHARD_CONFIG_STALE = 1 << 2
    AWAIT_CAPABLE = 1 << 3

    def __str__(self) -> str:
        return format_flags(int(self), _namer("OpReplyFlagBit", _OP_REPLY_LABELS))


_OP_MSG_LABELS = {
    1 << 0: "checksumPresent",
    1 << 1: "moreToCome",
    1 << 16: "exhaustAllowed",
}

_OP_QUERY_LABELS = {
    1 << 1: "TailableCursor",
    1 << 2: "SlaveOk",
    1 << 3: "OplogReplay",
    1 << 4: "NoCursorTimeout",
    1 << 5: "AwaitData",
    1 << 6: "Exhaust",
    1 << 7: "Partial",
}

_OP_REPLY_LABELS = {
    1 << 0: "CursorNotFound",
    1 << 1: "QueryFailure",
    1 << 2: "ShardConfigStale",
    1 << 3: "AwaitCapable",
}