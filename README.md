# ferretwire

Reading and writing MongoDB wire protocol messages.

`ferretwire` decodes and encodes the messages a MongoDB client and server
exchange: a 16-byte `MsgHeader` followed by an `OpMsg`, `OpQuery` or
`OpReply` body whose documents are BSON. Documents are plain `dict`
values, decoded and encoded with the `bson` module that comes with
pymongo (datetimes are decoded timezone-aware).

It also ships small helpers for working with captured traffic: a hex dump
parser that understands both Wireshark and classic `hexdump -C` style
output, flag formatting, BSON-aware value comparison and path access into
nested documents.

## Installation

```
pip install ferretwire
```

For running the test suite:

```
pip install "ferretwire[test]"
```

## Reading and writing messages

```python
import io

from ferretwire.messages import read_message, write_message

stream = io.BytesIO(raw_bytes)
header, body = read_message(stream)
print(header)   # length, request id, response_to and opcode
print(body)     # indented JSON rendering of the body

out = io.BytesIO()
write_message(out, header, body)
assert out.getvalue() == raw_bytes
```

`read_message` supports `OP_MSG`, `OP_QUERY` and `OP_REPLY`. It raises
`EOFError` when the stream ends before a message starts. A malformed or
truncated header, a truncated body, a malformed body or any other opcode
raises `ferretwire.errors.LazyError`, which records where it was raised
and keeps the error it wraps reachable through `unwrap()`.
`write_message` raises `ValueError` when the header's `message_length`
does not match the marshaled body plus the 16-byte header.

Message bodies can also be handled on their own:

- `OpMsg.unmarshal(data)` / `OpMsg.marshal()`. `OpMsg.document()` merges
  the kind 0 section and any kind 1 sections into a single document, the
  kind 1 documents becoming a list under the section's identifier; it
  returns `None` when there are no sections. `OpMsg.set_sections(...)`
  builds a message from `OpMsgSection` values and checks that they merge.
  When the checksum flag is set, the checksum is read and written but not
  validated.
- `OpQuery.unmarshal(data)` / `OpQuery.marshal()`; the return fields
  selector is optional.
- `OpReply.unmarshal(data)` / `OpReply.marshal()`; at most 1000 documents
  per reply are accepted, and `number_returned` must match the documents
  when marshaling.

`MsgHeader.read_from(stream)`, `MsgHeader.write_to(stream)` and
`MsgHeader.marshal()` work on the header alone; opcodes are the `OpCode`
enumeration and message lengths above 48,000,000 bytes are rejected.

## Flags

`OpMsgFlags`, `OpQueryFlags` and `OpReplyFlags` are `enum.IntFlag` types
that render as the list of set bits:

```python
from ferretwire.flags import OpMsgFlags

str(OpMsgFlags.CHECKSUM_PRESENT | OpMsgFlags.EXHAUST_ALLOWED)
# '[checksumPresent|exhaustAllowed]'
```

`flag_names(value, names)` and `format_flags(value, names)` do the same
for any integer value, given a callable that returns the name of a single
bit.

## Hex dumps

```python
from ferretwire.hexdump import dump, parse_dump, parse_dump_file

data = parse_dump(text_copied_from_wireshark)
print(dump(data))
data = parse_dump_file("testdata", "handshake1_body.hex")
```

## Test helpers

- `ferretwire.equality.equal(v1, v2)` compares BSON values the way tests
  want: NaN equals NaN, datetimes compare by instant, document key order
  matters, and 32-bit integers, `Int64` values and booleans never equal
  one another. `assert_equal` and `assert_not_equal` raise
  `AssertionError` with a unified diff; `diff_values` returns both
  renderings and that diff.
- `ferretwire.paths.get_by_path` and `set_by_path` reach into nested
  documents and arrays by a sequence of keys and indexes;
  `compare_and_set_by_path_num` and `compare_and_set_by_path_time` check
  that a value is within a delta of the expected one and then copy it
  into the expected document.
- `ferretwire.corpus.write_seed_corpus_file(func_name, data, base_dir)`
  stores a byte string under `testdata/fuzz/<func_name>/` as a fuzz seed
  corpus entry named after its SHA-256, and returns its path.
- `ferretwire.ctxutil.with_delay(done, delay)` returns a
  `threading.Event` that is set `delay` seconds after `done` is set,
  together with a function that sets it at once.

## Version information

Inside a git checkout, the command

```
ferretwire-version [directory]
```

runs git to record the current tag description, commit and branch as
`version.txt`, `commit.txt` and `branch.txt` in the given directory (the
current one by default). `ferretwire.version.generate` does the same from
Python, and `ferretwire.version.load_info` reads the files back into an
`Info` value, optionally checking them against build settings.

## What it does not do

`ferretwire` is a message codec, not a database. It does not listen for
connections, answer commands or store documents. It does not decode
`OP_UPDATE`, `OP_INSERT`, `OP_GET_MORE`, `OP_DELETE`, `OP_KILL_CURSORS`,
`OP_COMPRESSED` or other legacy opcodes, and it does not compress or
verify checksums.