"`#include <netinet/in.h>`"
from __future__ import annotations
from fdsock._raw import ffi, BSD_SOCKADDR
from fdsock.constants import AF
from fdsock.struct import Struct
from dataclasses import dataclass
import ipaddress
import socket
import typing as t

__all__ = [
    "SockaddrIn",
    "INADDR_ANY",
    "sockaddr_family",
]

INADDR_ANY = ipaddress.IPv4Address(0)

def sockaddr_family(data: bytes) -> int:
    "Read the address family out of a serialized struct sockaddr of any kind"
    # only the family field needs to be present; unnamed AF_UNIX peers are just that
    if len(data) < ffi.offsetof('struct sockaddr', 'sa_family') + ffi.sizeof('sa_family_t'):
        raise ValueError(f"{len(data)} bytes is too short to hold a struct sockaddr family")
    struct = ffi.cast('struct sockaddr*', ffi.from_buffer(data))
    return int(struct.sa_family)

@dataclass(frozen=True)
class SockaddrIn(Struct):
    """An IPv4 endpoint, as passed to connect and bind and returned by accept

    Both fields are held in host byte order; `to_bytes` swaps them into the
    network byte order that struct sockaddr_in carries on the wire.

    """
    port: int
    addr: ipaddress.IPv4Address
    family = AF.INET
    def __init__(self, port: int, addr: t.Union[str, int, bytes, ipaddress.IPv4Address]) -> None:
        # frozen, so the fields can only be set this way
        object.__setattr__(self, 'port', port)
        object.__setattr__(self, 'addr', ipaddress.IPv4Address(addr))

    def to_bytes(self) -> bytes:
        struct = ffi.new('struct sockaddr_in*')
        if BSD_SOCKADDR:
            struct.sin_len = ffi.sizeof('struct sockaddr_in')
        struct.sin_family = AF.INET
        struct.sin_port = socket.htons(self.port)
        struct.sin_addr.s_addr = socket.htonl(int(self.addr))
        return bytes(ffi.buffer(struct))

    T = t.TypeVar('T', bound='SockaddrIn')
    @classmethod
    def from_bytes(cls: t.Type[T], data: bytes) -> T:
        if len(data) < cls.sizeof():
            raise ValueError(f"struct sockaddr_in is {cls.sizeof()} bytes, got {len(data)}")
        struct = ffi.cast('struct sockaddr_in*', ffi.from_buffer(data))
        if struct.sin_family != AF.INET:
            raise ValueError(f"not an AF_INET address: sin_family is {struct.sin_family}")
        return cls(socket.ntohs(struct.sin_port), socket.ntohl(struct.sin_addr.s_addr))

    @classmethod
    def sizeof(cls) -> int:
        return ffi.sizeof('struct sockaddr_in')

    def addr_as_string(self) -> str:
        "The address as dotted decimal, the form PeerInfo and gethostbyname report"
        return str(self.addr)

    def __str__(self) -> str:
        return f"SockaddrIn({self.addr_as_string()}:{self.port})"

    def __repr__(self) -> str:
        return str(self)


#### Tests ####
from unittest import TestCase
class TestIn(TestCase):
    def test_sockaddrin(self) -> None:
        initial = SockaddrIn(42, "127.0.0.1")
        output = SockaddrIn.from_bytes(initial.to_bytes())
        self.assertEqual(initial.port, output.port)
        self.assertEqual(initial.addr, output.addr)
        self.assertEqual(sockaddr_family(initial.to_bytes()), AF.INET)

    def test_network_byte_order(self) -> None:
        data = SockaddrIn(0x1234, "10.0.0.1").to_bytes()
        struct = ffi.cast('struct sockaddr_in*', ffi.from_buffer(data))
        self.assertEqual(bytes(ffi.buffer(ffi.addressof(struct, 'sin_port'))), b'\x12\x34')
        self.assertEqual(bytes(ffi.buffer(ffi.addressof(struct, 'sin_addr'))), b'\x0a\x00\x00\x01')

    def test_wrong_family(self) -> None:
        data = bytearray(SockaddrIn(1, "127.0.0.1").to_bytes())
        struct = ffi.cast('struct sockaddr_in*', ffi.from_buffer(data))
        struct.sin_family = 0
        with self.assertRaises(Exception):
            SockaddrIn.from_bytes(bytes(data))
