"""Channel interface and a tag-demultiplexing buffered channel."""

from __future__ import annotations

import abc
import math
import random
import threading
import time
from typing import Any, Dict, Optional, Tuple

from abdregister.errors import RecvEmpty


class Channel(abc.ABC):
    """A bidirectional message channel to a single peer."""

    peer_id: int

    @abc.abstractmethod
    def try_recv(self) -> Any:
        """Return the next message, raising RecvEmpty or RecvDisconnected."""

    @abc.abstractmethod
    def send(self, value: Any) -> None:
        """Send a message, raising SendError when the peer is gone."""

    def add_latency(self, avg: float, stddev: float) -> None:
        """Set the simulated latency; plain channels have none."""

    def delay(self) -> Tuple[float, float]:
        """Return the latency mean and standard deviation in seconds."""
        return (0.0, 0.0)

    def wait(self) -> None:
        """Sleep for a normally distributed latency sample, if positive."""
        mean, stddev = self.delay()
        if not (math.isfinite(mean) and math.isfinite(stddev)) or stddev < 0:
            raise ValueError(f"invalid latency distribution: mean={mean}, stddev={stddev}")
        pause = random.gauss(mean, stddev)
        if pause > 0:
            time.sleep(pause)


class BufChannel(Channel):
    """Wraps a channel and sets aside messages whose tag is not awaited."""

    def __init__(self, channel: Channel) -> None:
        self.channel = channel
        self._buffered: Dict[int, Any] = {}
        self._lock = threading.Lock()

    @property
    def peer_id(self) -> int:  # type: ignore[override]
        return self.channel.peer_id

    def try_recv_tag(self, tag: int) -> Optional[Any]:
        """Return the message tagged ``tag`` if available, else None.

        Messages with other tags are buffered for later calls. Raises
        RecvDisconnected if the underlying channel is gone.
        """
        with self._lock:
            buffered = self._buffered.pop(tag, None)
        if buffered is not None:
            return buffered

        try:
            message = self.channel.try_recv()
        except RecvEmpty:
            return None

        if message.tag == tag:
            return message
        with self._lock:
            self._buffered[message.tag] = message
        return None

    def try_recv(self) -> Any:
        return self.channel.try_recv()

    def send(self, value: Any) -> None:
        self.channel.send(value)

    def add_latency(self, avg: float, stddev: float) -> None:
        self.channel.add_latency(avg, stddev)

    def delay(self) -> Tuple[float, float]:
        return self.channel.delay()

    def wait(self) -> None:
        self.channel.wait()

    def induce_fault(self) -> bool:
        """Make the underlying channel faulty; return whether it already was."""
        return self.channel.induce_fault()  # type: ignore[attr-defined]

    def clear_fault(self) -> bool:
        """Restore the underlying channel; return whether it was faulty."""
        return self.channel.clear_fault()  # type: ignore[attr-defined]