"""Reading and writing whole wire protocol messages."""

from __future__ import annotations

from typing import BinaryIO, Union

from .errors import LazyError, errorf, wrap
from .header import MSG_HEADER_LEN, MsgHeader, OpCode
from .op_msg import OpMsg
from .op_query import OpQuery
from .op_reply import OpReply

MsgBody = Union[OpMsg, OpQuery, OpReply]

_BODY_TYPES: dict[int, type[OpMsg] | type[OpQuery] | type[OpReply]] = {
    OpCode.OP_REPLY: OpReply,
    OpCode.OP_MSG: OpMsg,
    OpCode.OP_QUERY: OpQuery,
}


def _opcode_label(op_code: OpCode | int) -> str:
    if isinstance(op_code, OpCode):
        return str(op_code)
    return f"OpCode({op_code})"


def read_message(stream: BinaryIO) -> tuple[MsgHeader, MsgBody]:
    """Read one message from a binary stream.

    Raises ``EOFError`` if the stream ends before the message starts.
    """
    try:
        header = MsgHeader.read_from(stream)
    except LazyError as exc:
        raise wrap(exc) from exc

    size = header.message_length - MSG_HEADER_LEN
    data = stream.read(size)
    if len(data) < size:
        raise errorf("expected {}, read {}: {}", size, len(data), EOFError("unexpected EOF"))

    body_type = _BODY_TYPES.get(header.op_code)
    if body_type is None:
        raise errorf("unhandled opcode {}", _opcode_label(header.op_code))

    try:
        body = body_type.unmarshal(data)
    except LazyError as exc:
        raise wrap(exc) from exc

    return header, body


def write_message(stream: BinaryIO, header: MsgHeader, body: MsgBody) -> None:
    """Write a header and its body to a binary stream.

    The header's length must match the marshaled body.
    """
    try:
        data = body.marshal()
    except LazyError as exc:
        raise wrap(exc) from exc

    expected = len(data) + MSG_HEADER_LEN
    if expected != header.message_length:
        raise ValueError(
            f"expected length {len(data)} (marshaled body size) + {MSG_HEADER_LEN} "
            f"(fixed marshaled header size) = {expected}, got {header.message_length}"
        )

    header.write_to(stream)
    stream.write(data)