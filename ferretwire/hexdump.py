"""Hex dumps: producing them and parsing them back into bytes."""

from __future__ import annotations

import os

from .errors import wrap

_BYTES_PER_LINE = 16


def _printable(byte: int) -> str:
    return chr(byte) if 32 <= byte <= 126 else "."


def dump(data: bytes) -> str:
    """Return a canonical hex dump of ``data``, one line per 16 bytes."""
    lines = []
    for offset in range(0, len(data), _BYTES_PER_LINE):
        chunk = data[offset : offset + _BYTES_PER_LINE]
        cells = []
        for position in range(_BYTES_PER_LINE):
            cells.append(f"{chunk[position]:02x} " if position < len(chunk) else "   ")
            if position == 7:
                cells.append(" ")
        text = "".join(_printable(b) for b in chunk)
        lines.append(f"{offset:08x}  {''.join(cells)} |{text}|\n")
    return "".join(lines)


def parse_dump(text: str) -> bytes:
    """Parse a hex dump in either canonical or Wireshark form into bytes."""
    result = bytearray()
    for raw_line in text.strip().splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.endswith("|"):
            hex_part = line[8:60]
        else:
            hex_part = line[7:54]
        hex_part = hex_part.strip().replace(" ", "")

        try:
            result += bytes.fromhex(hex_part)
        except ValueError as exc:
            raise wrap(exc) from exc

    return bytes(result)


def parse_dump_file(*args: str | os.PathLike) -> bytes:
    """Read a hex dump from the file at the joined path and parse it."""
    with open(os.path.join(*args), encoding="utf-8") as fh:
        return parse_dump(fh.read())