from ferretwire.flags import (
    OpMsgFlags,
    OpQueryFlags,
    OpReplyFlags,
    flag_names,
    format_flags,
)


def test_op_msg_flags_string():
    assert str(OpMsgFlags(0)) == "[]"
    assert str(OpMsgFlags.CHECKSUM_PRESENT) == "[checksumPresent]"
    assert str(OpMsgFlags.MORE_TO_COME) == "[moreToCome]"
    combined = OpMsgFlags.CHECKSUM_PRESENT | OpMsgFlags.EXHAUST_ALLOWED
    assert str(combined) == "[checksumPresent|exhaustAllowed]"


def test_op_msg_flag_membership():
    combined = OpMsgFlags((1 << 0) | (1 << 16))
    assert OpMsgFlags.CHECKSUM_PRESENT in combined
    assert OpMsgFlags.EXHAUST_ALLOWED in combined
    assert OpMsgFlags.MORE_TO_COME not in combined
    assert str(combined) == "[checksumPresent|exhaustAllowed]"


def test_op_query_flags_string():
    flags = OpQueryFlags.SLAVE_OK | OpQueryFlags.PARTIAL
    assert str(flags) == "[SlaveOk|Partial]"
    assert str(OpQueryFlags(0)) == "[]"


def test_op_reply_flags_string():
    assert str(OpReplyFlags(1 << 3)) == "[AwaitCapable]"
    assert str(OpReplyFlags((1 << 0) | (1 << 1))) == "[CursorNotFound|QueryFailure]"


def test_unknown_bits_are_named_by_type():
    assert str(OpMsgFlags(1 << 2)) == "[OpMsgFlagBit(4)]"
    assert str(OpQueryFlags(1)) == "[OpQueryFlagBit(1)]"


def test_flag_names_order_and_format():
    assert flag_names(0b10001, lambda bit: f"b{bit}") == ["b1", "b16"]
    assert format_flags(0b10001, lambda bit: f"b{bit}") == "[b1|b16]"
    assert flag_names(0, str) == []


def test_flag_names_highest_bit():
    assert flag_names(1 << 31, str) == [str(1 << 31)]