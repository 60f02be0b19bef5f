"""OP_MSG: the extensible message format that carries commands and replies."""

from __future__ import annotations

import io
import json
import struct
from dataclasses import dataclass, field
from typing import Any, BinaryIO

from .errors import LazyError, errorf, new, wrap
from .flags import OpMsgFlags
from .op_query import (
    _document_json,
    _encode_document,
    _has_more,
    _read_cstring,
    _read_document,
    _read_exact,
    _write_cstring,
)

_UINT32 = struct.Struct("<I")
_SECTION_SIZE = struct.Struct("<i")


def _remaining(stream: io.BytesIO) -> int:
    return stream.getbuffer().nbytes - stream.tell()


@dataclass
class OpMsgSection:
    """One section of an OP_MSG: a body document (kind 0) or a document sequence (kind 1)."""

    kind: int = 0
    identifier: str = ""
    documents: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class OpMsg:
    """An OP_MSG message body."""

    flag_bits: OpMsgFlags = OpMsgFlags(0)
    checksum: int = 0
    _sections: list[OpMsgSection] = field(default_factory=list, init=False)

    @property
    def sections(self) -> tuple[OpMsgSection, ...]:
        """The message sections, in wire order."""
        return tuple(self._sections)

    @property
    def _checksum_present(self) -> bool:
        return bool(self.flag_bits & OpMsgFlags.CHECKSUM_PRESENT)

    def set_sections(self, *sections: OpMsgSection) -> None:
        """Replace the sections and check that they form a valid document."""
        self._sections = list(sections)
        try:
            self.document()
        except LazyError as exc:
            raise wrap(exc) from exc

    def document(self) -> dict[str, Any] | None:
        """Merge the sections into one document.

        Kind 1 sections become arrays under their identifiers. Returns ``None``
        when there are no sections.
        """
        doc: dict[str, Any] | None = None

        for section in self._sections:
            if section.kind == 0:
                count = len(section.documents)
                if count != 1:
                    raise errorf("wire.OpMsg.Document: {} documents in kind 0 section", count)
                if doc is not None:
                    raise errorf("wire.OpMsg.Document: doc is not empty already: {!r}", doc)
                doc = dict(section.documents[0])

            elif section.kind == 1:
                if not section.identifier:
                    raise new("wire.OpMsg.Document: empty section identifier")
                if doc is None:
                    raise new("wire.OpMsg.Document: doc is empty")
                if section.identifier in doc:
                    raise errorf(
                        "wire.OpMsg.Document: doc already has {!r} key", section.identifier
                    )
                doc[section.identifier] = list(section.documents)

            else:
                raise errorf("wire.OpMsg.Document: unknown kind {}", section.kind)

        return doc

    @classmethod
    def _read_section(cls, stream: BinaryIO) -> OpMsgSection:
        kind = _read_exact(stream, 1)[0]

        if kind == 0:
            return OpMsgSection(kind=0, documents=[_read_document(stream)])

        if kind == 1:
            (size,) = _SECTION_SIZE.unpack(_read_exact(stream, _SECTION_SIZE.size))
            if size < 5:
                raise errorf("wire.OpMsg.readFrom: invalid kind 1 section length {}", size)

            body = io.BytesIO(_read_exact(stream, size - 4))
            identifier = _read_cstring(body)
            documents = []
            while _has_more(body):
                documents.append(_read_document(body))
            return OpMsgSection(kind=1, identifier=identifier, documents=documents)

        raise errorf("kind is {}", kind)

    @classmethod
    def _read_from(cls, stream: io.BytesIO) -> OpMsg:
        (flags,) = _UINT32.unpack(_read_exact(stream, _UINT32.size))
        msg = cls(flag_bits=OpMsgFlags(flags))

        # with a checksum, the last four bytes are not a section
        peek = 5 if msg._checksum_present else 1
        while True:
            msg._sections.append(cls._read_section(stream))
            if _remaining(stream) < peek:
                break

        if msg._checksum_present:
            (msg.checksum,) = _UINT32.unpack(_read_exact(stream, _UINT32.size))

        msg.document()
        return msg

    @classmethod
    def unmarshal(cls, data: bytes) -> OpMsg:
        """Decode a message body; every byte must be consumed."""
        stream = io.BytesIO(data)
        try:
            msg = cls._read_from(stream)
        except (EOFError, LazyError) as exc:
            raise wrap(exc) from exc

        if _has_more(stream):
            raise errorf("unexpected end of the OpMsg: {}", None)

        return msg

    def marshal(self) -> bytes:
        """Encode the message body."""
        parts = [_UINT32.pack(int(self.flag_bits))]

        for section in self._sections:
            if section.kind == 0:
                count = len(section.documents)
                if count != 1:
                    raise ValueError(f"{count} documents in section with kind 0")
                parts.append(b"\x00")
                parts.append(_encode_document(section.documents[0]))

            elif section.kind == 1:
                body = _write_cstring(section.identifier) + b"".join(
                    _encode_document(doc) for doc in section.documents
                )
                parts.append(b"\x01")
                parts.append(_SECTION_SIZE.pack(len(body) + 4))
                parts.append(body)

            else:
                raise errorf("kind is {}", section.kind)

        if self._checksum_present:
            parts.append(_UINT32.pack(self.checksum))

        return b"".join(parts)

    def __str__(self) -> str:
        sections = []
        for section in self._sections:
            entry: dict[str, Any] = {"Kind": section.kind}
            if section.kind == 0:
                entry["Document"] = _document_json(section.documents[0])
            elif section.kind == 1:
                entry["Identifier"] = section.identifier
                entry["Documents"] = [_document_json(doc) for doc in section.documents]
            sections.append(entry)

        fields = {
            "FlagBits": int(self.flag_bits),
            "Checksum": self.checksum,
            "Sections": sections,
        }
        return json.dumps(fields, indent=2, sort_keys=True)