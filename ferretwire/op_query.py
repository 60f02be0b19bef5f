"""OP_QUERY: a query against a collection."""

from __future__ import annotations

import io
import json
import struct
from dataclasses import dataclass, field
from typing import Any, BinaryIO

import bson
from bson import json_util
from bson.codec_options import CodecOptions
from bson.errors import BSONError

from .errors import LazyError, errorf, wrap
from .flags import OpQueryFlags

DOCUMENT_CODEC = CodecOptions(tz_aware=True)

_PREFIX = struct.Struct("<I")
_COUNTS = struct.Struct("<ii")


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise EOFError("unexpected EOF" if data else "EOF")
    return data


def _read_cstring(stream: BinaryIO) -> str:
    buf = bytearray()
    while True:
        byte = stream.read(1)
        if not byte:
            raise EOFError("unexpected EOF" if buf else "EOF")
        if byte == b"\x00":
            break
        buf += byte
    try:
        return buf.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise wrap(exc) from exc


def _write_cstring(value: str) -> bytes:
    if "\x00" in value:
        raise errorf("cstring {!r} contains a NUL byte", value)
    return value.encode("utf-8") + b"\x00"


def _read_document(stream: BinaryIO) -> dict[str, Any]:
    head = _read_exact(stream, 4)
    length = int.from_bytes(head, "little", signed=True)
    if length < 5:
        raise errorf("invalid document length {}", length)
    body = _read_exact(stream, length - 4)
    try:
        return bson.decode(head + body, codec_options=DOCUMENT_CODEC)
    except (BSONError, ValueError, OverflowError) as exc:
        raise wrap(exc) from exc


def _encode_document(doc: dict[str, Any]) -> bytes:
    try:
        return bson.encode(doc, codec_options=DOCUMENT_CODEC)
    except (BSONError, ValueError, OverflowError, TypeError) as exc:
        raise wrap(exc) from exc


def _document_json(doc: dict[str, Any]) -> Any:
    text = json_util.dumps(doc, json_options=json_util.CANONICAL_JSON_OPTIONS)
    return json.loads(text)


def _has_more(stream: BinaryIO) -> bool:
    position = stream.tell()
    more = bool(stream.read(1))
    stream.seek(position)
    return more


@dataclass
class OpQuery:
    """A query against a collection."""

    flags: OpQueryFlags = OpQueryFlags(0)
    full_collection_name: str = ""
    number_to_skip: int = 0
    number_to_return: int = 0
    query: dict[str, Any] = field(default_factory=dict)
    return_fields_selector: dict[str, Any] | None = None

    @classmethod
    def unmarshal(cls, data: bytes) -> OpQuery:
        """Decode a message body; every byte must be consumed."""
        stream = io.BytesIO(data)
        try:
            (flags,) = _PREFIX.unpack(_read_exact(stream, _PREFIX.size))
            name = _read_cstring(stream)
            skip, to_return = _COUNTS.unpack(_read_exact(stream, _COUNTS.size))
            query = _read_document(stream)
            selector = _read_document(stream) if _has_more(stream) else None
        except (EOFError, LazyError) as exc:
            raise errorf("wire.OpQuery.UnmarshalBinary: {}", exc) from exc

        if _has_more(stream):
            raise errorf("unexpected end of the OpQuery: {}", None)

        return cls(
            flags=OpQueryFlags(flags),
            full_collection_name=name,
            number_to_skip=skip,
            number_to_return=to_return,
            query=query,
            return_fields_selector=selector,
        )

    def marshal(self) -> bytes:
        """Encode the message body."""
        parts = [
            _PREFIX.pack(int(self.flags)),
            _write_cstring(self.full_collection_name),
            _COUNTS.pack(self.number_to_skip, self.number_to_return),
            _encode_document(self.query),
        ]
        if self.return_fields_selector is not None:
            parts.append(_encode_document(self.return_fields_selector))
        return b"".join(parts)

    def __str__(self) -> str:
        fields: dict[str, Any] = {
            "Flags": int(self.flags),
            "FullCollectionName": self.full_collection_name,
            "NumberToSkip": self.number_to_skip,
            "NumberToReturn": self.number_to_return,
            "Query": _document_json(self.query),
        }
        if self.return_fields_selector is not None:
            fields["ReturnFieldsSelector"] = _document_json(self.return_fields_selector)
        return json.dumps(fields, indent=2, sort_keys=True)