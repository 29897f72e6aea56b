"""Requests and responses exchanged between register clients and servers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True, order=True)
class Timestamp:
    """Logical timestamp ordered by sequence number, then by client id."""

    seqno: int = 0
    client_id: int = 0

    def __str__(self) -> str:
        return f"{self.seqno}.{self.client_id}"


@dataclass(frozen=True)
class GetRequest:
    """Ask a replica for its value and timestamp."""


@dataclass(frozen=True)
class GetTimestampRequest:
    """Ask a replica for its timestamp only."""


@dataclass(frozen=True)
class WriteRequest:
    """Ask a replica to store ``val`` if ``timestamp`` is newer than its own."""

    val: Optional[int]
    timestamp: Timestamp


@dataclass(frozen=True)
class GetResponse:
    """A replica's value and timestamp."""

    val: Optional[int]
    timestamp: Timestamp


@dataclass(frozen=True)
class GetTimestampResponse:
    """A replica's timestamp."""

    timestamp: Timestamp


@dataclass(frozen=True)
class WriteResponse:
    """Acknowledgement of a write request."""


Request = Union[GetRequest, GetTimestampRequest, WriteRequest]
Response = Union[GetResponse, GetTimestampResponse, WriteResponse]