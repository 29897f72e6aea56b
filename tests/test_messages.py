from abdregister.messages import (
    GetRequest,
    GetResponse,
    GetTimestampRequest,
    GetTimestampResponse,
    Timestamp,
    WriteRequest,
    WriteResponse,
)


def test_default_timestamp_is_zero():
    ts = Timestamp()
    assert (ts.seqno, ts.client_id) == (0, 0)


def test_timestamp_orders_by_seqno_first():
    assert Timestamp(1, 9) < Timestamp(2, 0)
    assert Timestamp(2, 0) > Timestamp(1, 9)


def test_timestamp_ties_broken_by_client():
    assert Timestamp(3, 1) < Timestamp(3, 2)
    assert max([Timestamp(3, 2), Timestamp(3, 1)]) == Timestamp(3, 2)


def test_default_smaller_than_any_write():
    assert Timestamp() < Timestamp(1, 0)


def test_timestamp_str():
    assert str(Timestamp(3, 7)) == "3.7"


def test_timestamp_hashable():
    assert len({Timestamp(1, 1), Timestamp(1, 1), Timestamp(1, 2)}) == 2


def test_write_request_fields():
    req = WriteRequest(val=5, timestamp=Timestamp(1, 2))
    assert req.val == 5
    assert req.timestamp == Timestamp(1, 2)


def test_empty_messages_compare_equal():
    messages = [GetRequest(), GetTimestampRequest(), WriteResponse()]
    assert messages.index(GetRequest()) == 0
    assert messages.index(GetTimestampRequest()) == 1
    assert messages.index(WriteResponse()) == 2


def test_responses_carry_timestamp():
    ts = Timestamp(4, 1)
    assert GetResponse(None, ts).timestamp == GetTimestampResponse(ts).timestamp
    assert GetResponse(None, ts).val is None