import datetime
import json

import pytest
from bson.int64 import Int64
from bson.objectid import ObjectId

from ferretwire.errors import LazyError
from ferretwire.flags import OpReplyFlags
from ferretwire.op_reply import MAX_NUMBER_RETURNED, OpReply

PROCESS_ID = ObjectId(bytes([0x60, 0xFB, 0xED, 0x53, 0x71, 0xFE, 0x1B, 0xAE, 0x70, 0x33, 0x95, 0x05]))


def _handshake_reply(millis, connection_id):
    return OpReply(
        response_flags=OpReplyFlags.AWAIT_CAPABLE,
        cursor_id=0,
        starting_from=0,
        number_returned=1,
        documents=[
            {
                "ismaster": True,
                "topologyVersion": {"processId": PROCESS_ID, "counter": Int64(0)},
                "maxBsonObjectSize": 16777216,
                "maxMessageSizeBytes": 48000000,
                "maxWriteBatchSize": 100000,
                "localTime": datetime.datetime(
                    2021, 7, 24, 12, 54, 41, millis * 1000, tzinfo=datetime.timezone.utc
                ),
                "logicalSessionTimeoutMinutes": 30,
                "connectionId": connection_id,
                "minWireVersion": 0,
                "maxWireVersion": 13,
                "readOnly": False,
                "ok": 1.0,
            }
        ],
    )


@pytest.mark.parametrize("millis,connection_id", [(571, 28), (592, 29)])
def test_handshake_round_trip(millis, connection_id):
    reply = _handshake_reply(millis, connection_id)
    body = reply.marshal()
    assert len(body) + 16 == 319
    decoded = OpReply.unmarshal(body)
    assert decoded == reply
    assert decoded.response_flags == OpReplyFlags.AWAIT_CAPABLE


def test_int64_survives_round_trip():
    decoded = OpReply.unmarshal(_handshake_reply(571, 28).marshal())
    counter = decoded.documents[0]["topologyVersion"]["counter"]
    assert isinstance(counter, Int64) and counter == 0


def test_flags_encoding():
    body = _handshake_reply(571, 28).marshal()
    assert body[:4] == b"\x08\x00\x00\x00"


def test_marshal_count_mismatch():
    reply = OpReply(number_returned=2, documents=[{"a": 1}])
    with pytest.raises(LazyError) as info:
        reply.marshal()
    assert "len(Documents)=1, NumberReturned=2" in str(info.value)


@pytest.mark.parametrize("count", [-1, MAX_NUMBER_RETURNED + 1])
def test_invalid_number_returned(count):
    body = OpReply(number_returned=0).marshal()
    body = body[:16] + count.to_bytes(4, "little", signed=True)
    with pytest.raises(LazyError) as info:
        OpReply.unmarshal(body)
    assert f"invalid NumberReturned {count}" in str(info.value)


def test_trailing_bytes():
    body = OpReply(number_returned=1, documents=[{"a": 1}]).marshal()
    with pytest.raises(LazyError) as info:
        OpReply.unmarshal(body + b"\x00")
    assert "unexpected end of the OpReply" in str(info.value)


def test_truncated():
    body = _handshake_reply(571, 28).marshal()
    with pytest.raises(LazyError) as info:
        OpReply.unmarshal(body[:-3])
    assert "wire.OpReply.UnmarshalBinary" in str(info.value)


def test_empty_reply_round_trip():
    reply = OpReply(cursor_id=42, starting_from=7)
    assert OpReply.unmarshal(reply.marshal()) == reply


def test_str_is_json():
    parsed = json.loads(str(_handshake_reply(571, 28)))
    assert parsed["ResponseFlags"] == 8
    assert parsed["NumberReturned"] == 1
    assert parsed["Documents"][0]["ismaster"] is True
    assert len(parsed["Documents"]) == 1