"""Seed corpus files for fuzzing."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

_CORPUS_HEADER = "go test fuzz v1\n"

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    '"': '\\"',
    "\\": "\\\\",
}


def _quote(data: bytes) -> str:
    """Quote bytes as a double-quoted literal, escaping invalid UTF-8 as \\xHH."""
    out = ['"']
    for ch in data.decode("utf-8", "surrogateescape"):
        code = ord(ch)
        if 0xDC80 <= code <= 0xDCFF:
            out.append(f"\\x{code - 0xDC00:02x}")
        elif ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x80:
            out.append(f"\\x{code:02x}")
        elif code < 0x10000:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    out.append('"')
    return "".join(out)


def write_seed_corpus_file(
    func_name: str, data: bytes, base_dir: str | os.PathLike = "."
) -> Path:
    """Add ``data`` to the seed corpus of the fuzz function ``func_name``.

    The file is named after the SHA-256 of the data; its path is returned.
    """
    directory = Path(base_dir, "testdata", "fuzz", func_name)
    directory.mkdir(mode=0o777, parents=True, exist_ok=True)

    path = directory / f"test-{hashlib.sha256(data).hexdigest()}"
    content = f"{_CORPUS_HEADER}[]byte({_quote(data)})\n"
    path.write_bytes(content.encode("utf-8"))
    return path