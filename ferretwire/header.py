"""The standard message header that precedes every wire protocol message."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO

from .errors import errorf

MSG_HEADER_LEN = 16
MAX_MSG_LEN = 48_000_000

_HEADER = struct.Struct("<iiii")


class OpCode(enum.IntEnum):
    """Operation codes of wire protocol messages."""

    OP_REPLY = 1
    OP_UPDATE = 2001
    OP_INSERT = 2002
    OP_GET_BY_OID = 2003
    OP_QUERY = 2004
    OP_GET_MORE = 2005
    OP_DELETE = 2006
    OP_KILL_CURSORS = 2007
    OP_COMPRESSED = 2012
    OP_MSG = 2013

    def __str__(self) -> str:
        return self.name


def _opcode(value: int) -> OpCode | int:
    try:
        return OpCode(value)
    except ValueError:
        return value


def _opcode_name(value: int) -> str:
    if isinstance(value, OpCode):
        return str(value)
    return f"OpCode({value})"


@dataclass
class MsgHeader:
    """The header that every message starts with."""

    message_length: int = 0
    request_id: int = 0
    response_to: int = 0
    op_code: OpCode | int = 0

    @classmethod
    def read_from(cls, stream: BinaryIO) -> MsgHeader:
        """Read and validate a header from a binary stream.

        Raises ``EOFError`` if the stream is exhausted before any byte is read.
        """
        data = stream.read(MSG_HEADER_LEN)
        if not data:
            raise EOFError("EOF")
        if len(data) < MSG_HEADER_LEN:
            raise errorf(
                "expected {}, read {}: {}",
                MSG_HEADER_LEN,
                len(data),
                EOFError("unexpected EOF"),
            )

        length, request_id, response_to, op_code = _HEADER.unpack(data)
        header = cls(length, request_id, response_to, _opcode(op_code))

        if length < MSG_HEADER_LEN or length > MAX_MSG_LEN:
            raise errorf("invalid message length {}", length)

        return header

    def write_to(self, stream: BinaryIO) -> None:
        """Write the marshaled header to a binary stream."""
        stream.write(self.marshal())

    def marshal(self) -> bytes:
        """Return the 16-byte little-endian encoding of the header."""
        return _HEADER.pack(
            self.message_length,
            self.request_id,
            self.response_to,
            int(self.op_code),
        )

    def __str__(self) -> str:
        return (
            f"length: {self.message_length:5d}, id: {self.request_id:4d}, "
            f"response_to: {self.response_to:4d}, opcode: {_opcode_name(self.op_code)}"
        )