"""Exceptions raised by the network layer and by the register protocol."""

from __future__ import annotations

from typing import Any


class NetworkError(Exception):
    """Base class for failures of the simulated network."""


class TryListenError(NetworkError):
    """A non-blocking accept on a listener did not produce a connection."""


class ListenEmpty(TryListenError):
    """No connection request is waiting."""

    def __init__(self) -> None:
        super().__init__("TryListenError: no message came")


class ListenDisconnected(TryListenError):
    """The listening channel is closed."""

    def __init__(self) -> None:
        super().__init__("TryListenError: listenning channel broke")


class TryRecvError(NetworkError):
    """A non-blocking receive did not produce a message."""


class RecvEmpty(TryRecvError):
    """No message is waiting."""

    def __init__(self) -> None:
        super().__init__("TryRecvError: no message came")


class RecvDisconnected(TryRecvError):
    """The channel is closed and drained."""

    def __init__(self) -> None:
        super().__init__("TryRecvError: channel broke")


class SendError(NetworkError):
    """A message could not be delivered; the undelivered value is kept."""

    def __init__(self, value: Any) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f"SendError: {self.value}"


class ConnectError(NetworkError):
    """A connection to a server could not be established."""

    def __init__(self) -> None:
        super().__init__("Error connecting")


class AbdError(Exception):
    """A protocol round failed to gather enough responses."""

    round_name = "first"

    def __init__(self, obtained: int, required: int) -> None:
        self.obtained = obtained
        self.required = required
        super().__init__(
            f"failed to obtain a quorum for the {self.round_name} round; "
            f"got {obtained} of {required} required responses"
        )


class FailedFirstQuorum(AbdError):
    """The first round of an operation did not reach a quorum."""

    round_name = "first"


class FailedSecondQuorum(AbdError):
    """The second round of an operation did not reach a quorum."""

    round_name = "second"