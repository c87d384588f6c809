"""Conversions from host values to native socket-call arguments, and back

Each function either returns the converted value or raises ArgumentError
naming the operation and parameter; nothing is remembered between calls.

"""
from __future__ import annotations
from fdsock.constants import AF
from fdsock.errors import ArgumentError
from fdsock.netinet import SockaddrIn, sockaddr_family
from fdsock.struct import Int32
from fdsock.types import Endpoint, PeerInfo, Payload, TextPayload, BytesPayload
import collections.abc
import ipaddress
import numbers
import operator
import typing as t

__all__ = [
    "scalar_int",
    "handle",
    "port",
    "resolvable",
    "endpoint",
    "payload",
    "peer_info",
    "dotted",
]

def _as_int(value: t.Any) -> t.Optional[int]:
    "Return `value` as an int if it's a scalar integer, otherwise None"
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real) and not isinstance(value, numbers.Integral):
        # hosts which only have doubles pass 3.0 where they mean 3
        try:
            if float(value).is_integer():
                return int(value)
        except (OverflowError, ValueError):
            pass
        return None
    try:
        return operator.index(value)
    except TypeError:
        return None

def scalar_int(value: t.Any, operation: str, name: str,
               minimum: int=Int32.MIN, maximum: int=Int32.MAX) -> int:
    "Convert `value` to a native int, which by default must fit in a C int"
    result = _as_int(value)
    if result is None:
        raise ArgumentError(f"{operation}: {name} must be a scalar integer")
    if not (minimum <= result <= maximum):
        raise ArgumentError(f"{operation}: {name} must be between {minimum} and {maximum}, not {result}")
    return result

def handle(value: t.Any, operation: str) -> int:
    "Convert `value` to a socket handle: a non-negative scalar integer"
    result = _as_int(value)
    if result is None or not (0 <= result <= Int32.MAX):
        raise ArgumentError(f"{operation}: S must be a valid socket")
    return result

def port(value: t.Any, operation: str, name: str="PORT") -> int:
    return scalar_int(value, operation, name, 0, 0xFFFF)

def resolvable(hostname: str) -> bool:
    "Whether `hostname` can be handed to the resolver as a C string"
    if "\0" in hostname:
        return False
    try:
        hostname.encode()
    except UnicodeEncodeError:
        return False
    return True

def endpoint(value: t.Any, operation: str) -> Endpoint:
    """Convert `value` to an Endpoint

    `value` may already be an Endpoint, or it may be a mapping with exactly the
    keys "addr" (a non-empty string) and "port" (a scalar integer port).

    """
    if isinstance(value, Endpoint):
        addr, portnum = value.addr, value.port
    elif isinstance(value, collections.abc.Mapping):
        if set(value.keys()) != {"addr", "port"}:
            raise ArgumentError(f'{operation}: SERVERINFO must have exactly the fields "addr" and "port", '
                                f'not {sorted(map(str, value.keys()))}')
        addr, portnum = value["addr"], value["port"]
    else:
        raise ArgumentError(f"{operation}: SERVERINFO must be a struct")
    if not isinstance(addr, str) or _as_int(portnum) is None:
        raise ArgumentError(f'{operation}: SERVERINFO must have a string and integer in fields "addr" and "port"')
    if not addr:
        raise ArgumentError(f"{operation}: SERVERINFO addr is an empty string")
    if not resolvable(addr):
        raise ArgumentError(f"{operation}: SERVERINFO addr must be UTF-8 text without NUL characters, not {addr!r}")
    return Endpoint(addr, port(portnum, operation, "SERVERINFO port"))

def payload(value: t.Any, operation: str) -> Payload:
    """Classify `value` as text or as a sequence of bytes

    Buffers are accepted only if their items are single bytes; anything wider
    is ambiguous (which byte order? truncate or not?) so the caller has to
    format it first.

    """
    if isinstance(value, str):
        try:
            value.encode('utf-8')
        except UnicodeEncodeError as exn:
            raise ArgumentError(f"{operation}: invalid DATA to send; the text can not be encoded as UTF-8: {exn.reason}") from None
        return TextPayload(value)
    if isinstance(value, (list, tuple)):
        octets = [_as_int(x) for x in value]
        if any(x is None or not (0 <= x <= 0xFF) for x in octets):
            raise ArgumentError(f"{operation}: invalid DATA to send; elements must be integers from 0 to 255. "
                                "Please format it prior to sending")
        return BytesPayload(bytes(t.cast(t.List[int], octets)))
    try:
        view = memoryview(value)
    except TypeError:
        raise ArgumentError(f"{operation}: invalid DATA to send; expected a string or a byte sequence, "
                            f"not {type(value).__name__}. Please format it prior to sending") from None
    with view:
        if view.itemsize != 1:
            raise ArgumentError(f"{operation}: invalid DATA to send; elements are {view.itemsize} bytes wide. "
                                "Please format it prior to sending")
        return BytesPayload(view.tobytes())

def peer_info(data: bytes) -> PeerInfo:
    "Convert the serialized struct sockaddr filled in by accept into a PeerInfo"
    family = sockaddr_family(data)
    if family != AF.INET:
        return PeerInfo(family, 0, "")
    addr = SockaddrIn.from_bytes(data)
    return PeerInfo(family, addr.port, addr.addr_as_string())

def dotted(addrs: t.Iterable[ipaddress.IPv4Address]) -> t.List[str]:
    "Convert binary addresses to their 127.0.0.1 form, preserving order"
    return [str(addr) for addr in addrs]


#### Tests ####
from unittest import TestCase
class TestConvert(TestCase):
    def test_scalar_int(self) -> None:
        self.assertEqual(scalar_int(3, "op", "X"), 3)
        self.assertEqual(scalar_int(3.0, "op", "X"), 3)
        for bad in [3.5, "3", None, True, [3], float("nan")]:
            with self.assertRaises(ArgumentError):
                scalar_int(bad, "op", "X")
        with self.assertRaises(ArgumentError):
            scalar_int(2**31, "op", "X")

    def test_handle(self) -> None:
        self.assertEqual(handle(0, "op"), 0)
        with self.assertRaisesRegex(ArgumentError, "op: S must be a valid socket"):
            handle(-1, "op")

    def test_payload_kinds(self) -> None:
        import array
        self.assertEqual(payload("hi", "send").to_bytes(), b"hi")
        self.assertEqual(payload(b"hi", "send").to_bytes(), b"hi")
        self.assertEqual(payload([104, 105], "send").to_bytes(), b"hi")
        self.assertEqual(payload(array.array('B', b"hi"), "send").to_bytes(), b"hi")
        with self.assertRaisesRegex(ArgumentError, "format it prior to sending"):
            payload(array.array('i', [1, 2]), "send")
        with self.assertRaisesRegex(ArgumentError, "format it prior to sending"):
            payload([256], "send")
        with self.assertRaisesRegex(ArgumentError, "format it prior to sending"):
            payload(42, "send")
        with self.assertRaisesRegex(ArgumentError, "UTF-8"):
            payload("\ud800", "send")

    def test_resolvable(self) -> None:
        self.assertTrue(resolvable("localhost"))
        self.assertTrue(resolvable("bücher.example"))
        self.assertFalse(resolvable("\ud800"))
        self.assertFalse(resolvable("local\x00host"))

    def test_endpoint_addr_must_reach_the_resolver(self) -> None:
        for addr in ["\ud800", "local\x00host"]:
            with self.assertRaisesRegex(ArgumentError, "connect: SERVERINFO addr"):
                endpoint({"addr": addr, "port": 80}, "connect")
