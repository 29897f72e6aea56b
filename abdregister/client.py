"""Client side of the ABD atomic register protocol."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set, Tuple

from abdregister.errors import FailedFirstQuorum, FailedSecondQuorum, TryRecvError
from abdregister.messages import (
    GetRequest,
    GetResponse,
    GetTimestampRequest,
    GetTimestampResponse,
    Timestamp,
    WriteRequest,
    WriteResponse,
)
from abdregister.pool import ConnectionPool
from abdregister.tagged import Tagged

logger = logging.getLogger(__name__)


def _quorum_of(received: List[bool]) -> Set[int]:
    return {idx for idx, got in enumerate(received) if got}


def _collect_acks(pool: ConnectionPool, request_tag: int, received: List[bool], needed: int) -> int:
    """Poll for write acknowledgements until ``needed`` arrive or all replicas answered."""
    n_ok = 0
    while n_ok < needed and not all(received):
        for idx, reply in pool.poll(request_tag):
            if isinstance(reply, TryRecvError):
                if not received[idx]:
                    received[idx] = True
                    logger.error(
                        "failed to get response from node #%d for request %d: %r",
                        idx,
                        request_tag,
                        reply,
                    )
            elif reply is None:
                continue
            elif isinstance(reply.inner, WriteResponse):
                received[idx] = True
                n_ok += 1
            else:
                received[idx] = True
                logger.error("got weird response to write request from node #%d: %r", idx, reply)
    return n_ok


def read_register(pool: ConnectionPool) -> Tuple[Optional[int], Timestamp]:
    """Read the register, writing the value back if replicas disagree.

    Raises FailedFirstQuorum or FailedSecondQuorum when a round cannot reach
    a majority of replicas.
    """
    pool.shuffle_faults()
    logger.info("client %d reading: first round", pool.client_id)
    request = Tagged.wrap(GetRequest())
    request_tag = request.tag
    pool.broadcast(request)

    quorum = pool.quorum_size()
    still_available = pool.n_nodes
    replies: Dict[int, Timestamp] = {}
    failed: Set[int] = set()
    max_ts = Timestamp()
    max_val: Optional[int] = None

    while len(replies) < quorum and still_available - len(failed) > 0:
        for idx, reply in pool.poll(request_tag):
            if isinstance(reply, TryRecvError):
                if idx not in failed:
                    failed.add(idx)
                    logger.error(
                        "failed to get response from node #%d for request %d: %r",
                        idx,
                        request_tag,
                        reply,
                    )
            elif reply is None:
                continue
            elif isinstance(reply.inner, GetResponse):
                still_available -= 1
                replies[idx] = reply.inner.timestamp
                if reply.inner.timestamp > max_ts:
                    max_ts = reply.inner.timestamp
                    max_val = reply.inner.val
            else:
                still_available -= 1
                logger.error(
                    "got weird response to get request %d from node #%d: %r",
                    request_tag,
                    idx,
                    reply,
                )

    if len(replies) < quorum:
        raise FailedFirstQuorum(len(replies), quorum)

    logger.info("client %d reading: round one quorum obtained %r", pool.client_id, replies)

    if sum(1 for ts in replies.values() if ts == max_ts) >= quorum:
        logger.info("client %d reading: unanimous decision", pool.client_id)
        return max_val, max_ts

    received = [replies.get(idx) == max_ts for idx in range(pool.n_nodes)]
    max_ts_reads = sum(received)
    logger.info(
        "client %d reading: writing back, got %d/%d agreement",
        pool.client_id,
        max_ts_reads,
        len(replies),
    )
    request = Tagged.wrap(WriteRequest(val=max_val, timestamp=max_ts))
    pool.broadcast_filter(request, lambda idx: replies.get(idx) != max_ts)

    n_ok = _collect_acks(pool, request.tag, received, quorum - max_ts_reads)

    if n_ok + max_ts_reads >= quorum:
        logger.info(
            "client %d reading: round two quorum obtained %r",
            pool.client_id,
            _quorum_of(received),
        )
        return max_val, max_ts
    raise FailedSecondQuorum(n_ok + max_ts_reads, quorum)


def write_register(pool: ConnectionPool, value: Optional[int]) -> None:
    """Write ``value`` with a timestamp newer than any a majority has seen.

    Raises FailedFirstQuorum or FailedSecondQuorum when a round cannot reach
    a majority of replicas.
    """
    pool.shuffle_faults()
    logger.info("client %d writing %r: read timestamp phase", pool.client_id, value)
    request = Tagged.wrap(GetTimestampRequest())
    request_tag = request.tag
    pool.broadcast(request)

    quorum = pool.quorum_size()
    n_ok = 0
    received = [False] * pool.n_nodes
    max_ts = Timestamp()
    while n_ok < quorum and not all(received):
        for idx, reply in pool.poll(request_tag):
            if isinstance(reply, TryRecvError):
                if not received[idx]:
                    received[idx] = True
                    logger.error(
                        "failed to get response from node #%d for request %d: %r",
                        idx,
                        request_tag,
                        reply,
                    )
            elif reply is None:
                continue
            elif isinstance(reply.inner, GetTimestampResponse):
                n_ok += 1
                received[idx] = True
                if reply.inner.timestamp > max_ts:
                    max_ts = reply.inner.timestamp
            else:
                received[idx] = True
                logger.error(
                    "got weird response to timestamp request from node #%d: %r", idx, reply
                )

    if n_ok < quorum:
        raise FailedFirstQuorum(n_ok, quorum)
    logger.info(
        "client %d writing: received quorum %r for read phase, max timestamp %s",
        pool.client_id,
        _quorum_of(received),
        max_ts,
    )

    logger.info("client %d writing: write phase", pool.client_id)
    request = Tagged.wrap(
        WriteRequest(
            val=value,
            timestamp=Timestamp(seqno=max_ts.seqno + 1, client_id=pool.client_id),
        )
    )
    pool.broadcast(request)

    received = [False] * pool.n_nodes
    n_ok = _collect_acks(pool, request.tag, received, quorum)

    if n_ok >= quorum:
        logger.info(
            "client %d writing: received quorum %r for write phase",
            pool.client_id,
            _quorum_of(received),
        )
        return
    raise FailedSecondQuorum(n_ok, quorum)