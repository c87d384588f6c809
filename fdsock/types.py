"""The structured values which cross between callers and the socket calls

These are the host-facing shapes: the field names are part of the
interface, so don't rename them.

"""
from __future__ import annotations
from dataclasses import dataclass
import typing as t

__all__ = [
    "Endpoint",
    "PeerInfo",
    "Received",
    "TextPayload",
    "BytesPayload",
    "Payload",
]

@dataclass(frozen=True)
class Endpoint:
    "Where to connect to: a host name or dotted-decimal address, and a port"
    addr: str
    port: int

@dataclass(frozen=True)
class PeerInfo:
    """The remote side of an accepted connection

    `sin_port` is in host byte order, and `sin_addr` is in 127.0.0.1 form.
    """
    sin_family: int
    sin_port: int
    sin_addr: str

    def as_dict(self) -> t.Dict[str, t.Any]:
        return {"sin_family": self.sin_family, "sin_port": self.sin_port, "sin_addr": self.sin_addr}

class Received(t.NamedTuple):
    """The result of recv.

    `count` is the raw status: the number of bytes read, 0 if the peer has
    shut down, or -1 if there was an error (including "no data right now" on
    a non-blocking read). `data` always has exactly max(count, 0) bytes.

    """
    data: bytes
    count: int

@dataclass(frozen=True)
class TextPayload:
    text: str

    def to_bytes(self) -> bytes:
        return self.text.encode('utf-8')

@dataclass(frozen=True)
class BytesPayload:
    data: bytes

    def to_bytes(self) -> bytes:
        return self.data

Payload = t.Union[TextPayload, BytesPayload]
