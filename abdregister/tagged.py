"""Messages carrying a process-wide unique request tag."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

_counter = itertools.count()
_counter_lock = threading.Lock()


def _next_tag() -> int:
    with _counter_lock:
        return next(_counter)


@dataclass(frozen=True)
class Tagged(Generic[T]):
    """A payload paired with the tag of the request it belongs to."""

    tag: int
    inner: T

    @classmethod
    def wrap(cls, inner: T) -> "Tagged[T]":
        """Wrap ``inner`` with a fresh tag, unique within the process."""
        return cls(_next_tag(), inner)