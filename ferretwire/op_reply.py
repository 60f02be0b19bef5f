"""OP_REPLY: the server's response to OP_QUERY."""

from __future__ import annotations

import io
import json
import struct
from dataclasses import dataclass, field
from typing import Any

from .errors import LazyError, errorf
from .flags import OpReplyFlags
from .op_query import _document_json, _encode_document, _has_more, _read_document, _read_exact

MAX_NUMBER_RETURNED = 1000

_FIXED = struct.Struct("<Iqii")


@dataclass
class OpReply:
    """A reply carrying documents returned for a query."""

    response_flags: OpReplyFlags = OpReplyFlags(0)
    cursor_id: int = 0
    starting_from: int = 0
    number_returned: int = 0
    documents: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def unmarshal(cls, data: bytes) -> OpReply:
        """Decode a message body; every byte must be consumed."""
        stream = io.BytesIO(data)
        try:
            flags, cursor_id, starting_from, number_returned = _FIXED.unpack(
                _read_exact(stream, _FIXED.size)
            )
            if number_returned < 0 or number_returned > MAX_NUMBER_RETURNED:
                raise errorf("wire.OpReply.ReadFrom: invalid NumberReturned {}", number_returned)
            documents = [_read_document(stream) for _ in range(number_returned)]
        except (EOFError, LazyError) as exc:
            raise errorf("wire.OpReply.UnmarshalBinary: {}", exc) from exc

        if _has_more(stream):
            raise errorf("unexpected end of the OpReply: {}", None)

        return cls(
            response_flags=OpReplyFlags(flags),
            cursor_id=cursor_id,
            starting_from=starting_from,
            number_returned=number_returned,
            documents=documents,
        )

    def marshal(self) -> bytes:
        """Encode the message body."""
        if len(self.documents) != self.number_returned:
            raise errorf(
                "wire.OpReply.MarshalBinary: len(Documents)={}, NumberReturned={}",
                len(self.documents),
                self.number_returned,
            )
        fixed = _FIXED.pack(
            int(self.response_flags),
            self.cursor_id,
            self.starting_from,
            self.number_returned,
        )
        return fixed + b"".join(_encode_document(doc) for doc in self.documents)

    def __str__(self) -> str:
        fields = {
            "ResponseFlags": int(self.response_flags),
            "CursorID": self.cursor_id,
            "StartingFrom": self.starting_from,
            "NumberReturned": self.number_returned,
            "Documents": [_document_json(doc) for doc in self.documents],
        }
        return json.dumps(fields, indent=2, sort_keys=True)