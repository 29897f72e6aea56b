# abdregister

The client side of the ABD (Attiya–Bar-Noy–Dolev) replicated atomic register. It also
provides the message types, the channel interface and the connection pools that the protocol
runs over.

A write first asks the replicas for their timestamps. It then broadcasts the value with a
timestamp one sequence number past the highest it saw. A read gathers values from a majority.
If the replicas in that majority do not all agree on the newest timestamp, the read writes the
newest value back before it returns.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `abdregister.messages` holds the protocol messages.
  - `Timestamp(seqno, client_id)` is ordered by `seqno`, then by `client_id`. Its string form
    is `seqno.client_id`.
  - The requests are `GetRequest`, `GetTimestampRequest` and `WriteRequest(val, timestamp)`.
  - The responses are `GetResponse(val, timestamp)`, `GetTimestampResponse(timestamp)` and
    `WriteResponse`.
- `abdregister.tagged` holds `Tagged(tag, inner)`. `Tagged.wrap(inner)` gives the payload a tag
  that is unique within the process. A reply carries the tag of its request.
- `abdregister.channel` holds the `Channel` base class and `BufChannel`.
  - A `Channel` implements `try_recv()` and `send(value)`. `try_recv()` raises `RecvEmpty` or
    `RecvDisconnected` when no message is returned. A channel may also override `add_latency`
    and `delay`. `wait()` sleeps for a latency sample drawn from a normal distribution.
  - `BufChannel` wraps a channel. Its `try_recv_tag(tag)` returns the reply with that tag, or
    `None` if the reply has not arrived yet. Replies with other tags are set aside for later
    calls.
  - `BufChannel.induce_fault()` and `BufChannel.clear_fault()` pass through to the wrapped
    channel.
- `abdregister.pool` holds the connection pools.
  - `FlawlessPool(channels, client_id)` leaves every connection alone.
  - `LossyPool(channels, faults, client_id)` marks a random set of up to `faults` connections
    as faulty before each operation. It does this through `induce_fault` and `clear_fault`, so
    the wrapped channels must provide both. If `2 * faults + 1` is more than the number of
    channels, the pool logs a warning.
  - Every pool offers `broadcast`, `broadcast_filter`, `poll`, `quorum_size()` and `n_nodes`.
    `quorum_size()` is the smallest majority.
- `abdregister.client` holds the two operations.
  - `write_register(pool, value)` writes a value.
  - `read_register(pool)` returns `(value, timestamp)`.
- `abdregister.errors` holds the exceptions.
  - `FailedFirstQuorum` and `FailedSecondQuorum` are raised when a phase does not reach a
    majority. Both are subclasses of `AbdError` and carry `obtained` and `required`.
  - The network errors are `RecvEmpty`, `RecvDisconnected`, `ListenEmpty`,
    `ListenDisconnected`, `SendError` and `ConnectError`.

## Example

The replica below lives in the channel itself and answers each request as soon as the request
is sent:

```python
from abdregister.channel import BufChannel, Channel
from abdregister.client import read_register, write_register
from abdregister.errors import RecvEmpty
from abdregister.messages import (
    GetRequest, GetResponse, GetTimestampRequest, GetTimestampResponse,
    Timestamp, WriteResponse,
)
from abdregister.pool import FlawlessPool
from abdregister.tagged import Tagged


class LoopbackReplica(Channel):
    def __init__(self, peer_id):
        self.peer_id = peer_id
        self.value, self.timestamp = None, Timestamp()
        self.outbox = []

    def send(self, value):
        request = value.inner
        if isinstance(request, GetRequest):
            reply = GetResponse(self.value, self.timestamp)
        elif isinstance(request, GetTimestampRequest):
            reply = GetTimestampResponse(self.timestamp)
        else:
            if self.timestamp < request.timestamp:
                self.value, self.timestamp = request.val, request.timestamp
            reply = WriteResponse()
        self.outbox.append(Tagged(value.tag, reply))

    def try_recv(self):
        if not self.outbox:
            raise RecvEmpty()
        return self.outbox.pop(0)


pool = FlawlessPool([BufChannel(LoopbackReplica(i)) for i in range(3)], 7)
write_register(pool, 42)
value, timestamp = read_register(pool)
print(value, timestamp)   # 42 1.7
```

## What this package does not do

- It has no register server. Replies come from whatever is on the other side of the channels
  you supply.
- It has no ready-made network or simulated channel. You supply the `Channel` subclasses.
- It has no command-line program. It is used only as a library.