import pytest

from abdregister.errors import (
    AbdError,
    ConnectError,
    FailedFirstQuorum,
    FailedSecondQuorum,
    ListenDisconnected,
    ListenEmpty,
    NetworkError,
    RecvDisconnected,
    RecvEmpty,
    SendError,
    TryListenError,
    TryRecvError,
)


def test_listen_messages():
    assert str(ListenEmpty()) == "TryListenError: no message came"
    assert str(ListenDisconnected()) == "TryListenError: listenning channel broke"


def test_recv_messages():
    assert str(RecvEmpty()) == "TryRecvError: no message came"
    assert str(RecvDisconnected()) == "TryRecvError: channel broke"


def test_connect_message():
    assert str(ConnectError()) == "Error connecting"


def test_send_error_keeps_value():
    err = SendError("payload")
    assert err.value == "payload"
    assert str(err) == "SendError: payload"


@pytest.mark.parametrize(
    "exc, base, message",
    [
        (ListenEmpty(), TryListenError, "TryListenError: no message came"),
        (ListenDisconnected(), TryListenError, "TryListenError: listenning channel broke"),
        (RecvEmpty(), TryRecvError, "TryRecvError: no message came"),
        (RecvDisconnected(), TryRecvError, "TryRecvError: channel broke"),
        (SendError(1), NetworkError, "SendError: 1"),
        (ConnectError(), NetworkError, "Error connecting"),
    ],
)
def test_hierarchy(exc, base, message):
    with pytest.raises(base) as info:
        raise exc
    assert str(info.value) == message


def test_first_quorum_message():
    err = FailedFirstQuorum(2, 3)
    assert (err.obtained, err.required) == (2, 3)
    assert str(err) == (
        "failed to obtain a quorum for the first round; got 2 of 3 required responses"
    )


def test_second_quorum_message():
    err = FailedSecondQuorum(1, 4)
    assert str(err) == (
        "failed to obtain a quorum for the second round; got 1 of 4 required responses"
    )


def test_quorum_errors_share_base():
    err = FailedSecondQuorum(0, 1)
    assert isinstance(err, AbdError)
    assert (err.obtained, err.required) == (0, 1)
    assert str(err) == (
        "failed to obtain a quorum for the second round; got 0 of 1 required responses"
    )