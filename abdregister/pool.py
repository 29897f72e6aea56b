"""Pools of buffered channels to every replica of the register."""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Iterator, List, Sequence, Tuple, Union

from abdregister.channel import BufChannel
from abdregister.errors import SendError, TryRecvError

logger = logging.getLogger(__name__)

PollOutcome = Union[Any, None, TryRecvError]


class ConnectionPool:
    """Channels to all replicas, used to broadcast requests and poll replies."""

    def __init__(self, channels: Sequence[BufChannel], client_id: int) -> None:
        self.channels: List[BufChannel] = list(channels)
        self.client_id = client_id

    @property
    def n_nodes(self) -> int:
        """Number of replicas in the pool."""
        return len(self.channels)

    def __len__(self) -> int:
        return len(self.channels)

    def broadcast_filter(self, request: Any, predicate: Callable[[int], bool]) -> None:
        """Send ``request`` to every replica whose index satisfies ``predicate``.

        Send failures are logged and otherwise ignored.
        """
        logger.info("broadcast %r", request)
        for idx, channel in enumerate(self.channels):
            if not predicate(idx):
                continue
            try:
                channel.send(request)
            except SendError as exc:
                logger.error("failed to send request to a replica %d: %r", idx, exc)
        logger.debug("broadcast complete %r (client %d)", request, self.client_id)

    def broadcast(self, request: Any) -> None:
        """Send ``request`` to every replica."""
        self.broadcast_filter(request, lambda _idx: True)

    def quorum_size(self) -> int:
        """Smallest majority of the replicas."""
        return self.n_nodes // 2 + 1

    def poll(self, request_tag: int) -> Iterator[Tuple[int, PollOutcome]]:
        """Try once to receive the reply tagged ``request_tag`` from each replica.

        Yields ``(index, outcome)`` where outcome is the tagged reply, None when
        nothing has arrived yet, or the TryRecvError raised by a broken channel.
        """
        for idx, channel in enumerate(self.channels):
            try:
                yield idx, channel.try_recv_tag(request_tag)
            except TryRecvError as exc:
                yield idx, exc

    def shuffle_faults(self) -> None:
        """Rearrange injected faults; a reliable pool has none."""


class FlawlessPool(ConnectionPool):
    """A pool whose connections never have faults injected."""


class LossyPool(ConnectionPool):
    """A pool that injects up to ``faults`` failed connections per operation."""

    def __init__(self, channels: Sequence[BufChannel], faults: int, client_id: int) -> None:
        super().__init__(channels, client_id)
        self.faults = faults
        required = 2 * faults + 1
        if required > self.n_nodes:
            logger.warning(
                "Constructing a lossy pool for %d faults with too few nodes "
                "(have %d, required %d)",
                faults,
                self.n_nodes,
                required,
            )

    def shuffle_faults(self) -> None:
        """Mark a random set of at most ``faults`` connections as faulty."""
        count = random.randint(0, self.faults)
        marks = [i < count for i in range(self.n_nodes)]
        random.shuffle(marks)
        for idx, (channel, faulty) in enumerate(zip(self.channels, marks)):
            if faulty:
                if not channel.induce_fault():
                    logger.warning("induced a fault on connection %d", idx)
            elif channel.clear_fault():
                logger.warning("restored connection %d", idx)