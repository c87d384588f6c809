from unittest import TestCase
# the embedded tests in the data modules
from fdsock.convert import TestConvert
from fdsock.netinet import TestIn
from fdsock.convert import peer_info, dotted
from fdsock._raw import ffi
from fdsock.constants import AF
from fdsock.netinet import SockaddrIn, sockaddr_family
from fdsock.struct import Int32
from fdsock.types import PeerInfo
import ipaddress
import struct

class TestInt32(TestCase):
    def test_native_layout(self) -> None:
        self.assertEqual(Int32(1).to_bytes(), struct.pack('i', 1))
        self.assertEqual(Int32.sizeof(), 4)
        self.assertEqual(Int32.from_bytes(Int32(-7).to_bytes()), -7)

    def test_too_small(self) -> None:
        with self.assertRaisesRegex(ValueError, "need 4 bytes"):
            Int32.from_bytes(b"\x01")

class TestPeerInfo(TestCase):
    def test_inet(self) -> None:
        self.assertEqual(peer_info(SockaddrIn(5555, "192.0.2.1").to_bytes()),
                         PeerInfo(AF.INET, 5555, "192.0.2.1"))

    def test_other_family(self) -> None:
        data = bytearray(SockaddrIn(5555, "192.0.2.1").to_bytes())
        ffi.cast('struct sockaddr*', ffi.from_buffer(data)).sa_family = 1
        self.assertEqual(sockaddr_family(bytes(data)), 1)
        self.assertEqual(peer_info(bytes(data)), PeerInfo(1, 0, ""))

    def test_dotted_keeps_order(self) -> None:
        addrs = [ipaddress.IPv4Address("10.0.0.2"), ipaddress.IPv4Address("10.0.0.1")]
        self.assertEqual(dotted(addrs), ["10.0.0.2", "10.0.0.1"])
