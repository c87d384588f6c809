from unittest import TestCase
import fdsock
from fdsock import AF, SOCK, SOL, SO, MSG
from fdsock.errors import *
from fdsock._raw import WINDOWS
from fdsock.local import LocalSocketInterface, socket_strerror
import errno
import os
import socket
import logging
import typing as t
logger = logging.getLogger(__name__)
# logging.basicConfig(level=logging.DEBUG)

PORT = 9001

class TestSocket(TestCase):
    "Real sockets on the loopback interface"
    def setUp(self) -> None:
        self.handles: t.List[int] = []

    def tearDown(self) -> None:
        for handle in self.handles:
            fdsock.disconnect(handle)

    def disconnect(self, handle: int) -> int:
        self.handles.remove(handle)
        return fdsock.disconnect(handle)

    def make_socket(self, *args: t.Any) -> int:
        sock = fdsock.socket(*args)
        self.handles.append(sock)
        return sock

    def make_server(self, port: int=PORT) -> int:
        server = self.make_socket(AF.INET, SOCK.STREAM, 0)
        fdsock.setsockopt(server, SOL.SOCKET, SO.REUSEADDR, 1)
        self.assertEqual(fdsock.bind(server, port), 0)
        self.assertEqual(fdsock.listen(server, 1), 0)
        return server

    def make_connection(self) -> t.Tuple[int, int, int]:
        "Returns the listening socket, the connecting socket, and the accepted socket"
        server = self.make_server()
        client = self.make_socket(AF.INET, SOCK.STREAM, 0)
        self.assertEqual(fdsock.connect(client, {"addr": "127.0.0.1", "port": PORT}), 0)
        server_data, info = fdsock.accept(server)
        self.handles.append(server_data)
        return server, client, server_data

    def test_echo(self) -> None:
        server = self.make_server()
        self.assertGreaterEqual(server, 0)
        client = self.make_socket(AF.INET, SOCK.STREAM, 0)
        self.assertGreaterEqual(client, 0)

        server_info = {"addr": "127.0.0.1", "port": PORT}
        self.assertEqual(fdsock.connect(client, server_info), 0)
        server_data, _ = fdsock.accept(server)
        self.handles.append(server_data)
        self.assertGreaterEqual(server_data, 0)

        msg = "Hello socket-land!"
        self.assertEqual(fdsock.send(client, msg), len(msg))

        msg_s, len_s = fdsock.recv(server_data, 100)
        self.assertEqual(len_s, len(msg))
        self.assertEqual(msg_s, msg.encode())

        self.assertEqual(fdsock.send(server_data, msg_s), len(msg_s))
        msg_c, len_c = fdsock.recv(client, 100)
        self.assertEqual(len_c, len(msg))
        self.assertEqual(msg, msg_c.decode())

        self.assertEqual(self.disconnect(client), 0)
        self.assertEqual(self.disconnect(server_data), 0)
        self.assertEqual(self.disconnect(server), 0)

    def test_reuseaddr(self) -> None:
        "Without SO_REUSEADDR, rebinding a port with a connection in TIME_WAIT gives EADDRINUSE"
        server = self.make_socket(AF.INET, SOCK.STREAM, 0)
        fdsock.setsockopt(server, SOL.SOCKET, SO.REUSEADDR, 1)
        self.assertEqual(fdsock.getsockopt(server, SOL.SOCKET, SO.REUSEADDR), 1)
        fdsock.bind(server, PORT)
        fdsock.listen(server, 1)

        client = self.make_socket(AF.INET, SOCK.STREAM, 0)
        fdsock.connect(client, {"addr": "127.0.0.1", "port": PORT})
        server_data, _ = fdsock.accept(server)
        self.handles.append(server_data)
        # the server side closes first, so its end goes into TIME_WAIT
        self.disconnect(server_data)
        self.disconnect(server)

        server2 = self.make_socket(AF.INET, SOCK.STREAM, 0)
        fdsock.setsockopt(server2, SOL.SOCKET, SO.REUSEADDR, 1)
        self.assertEqual(fdsock.getsockopt(server2, SOL.SOCKET, SO.REUSEADDR), 1)
        self.assertEqual(fdsock.bind(server2, PORT), 0)
        self.assertEqual(fdsock.listen(server2, 1), 0)

    def test_accept_shape(self) -> None:
        server = self.make_server()
        client = self.make_socket()
        fdsock.connect(client, fdsock.Endpoint("localhost", PORT))
        server_data, info = fdsock.accept(server)
        self.handles.append(server_data)
        self.assertNotEqual(server_data, server)
        self.assertNotEqual(server_data, client)
        self.assertEqual(info.sin_family, AF.INET)
        self.assertEqual(info.sin_addr, "127.0.0.1")
        self.assertTrue(0 < info.sin_port <= 0xFFFF)
        self.assertNotEqual(info.sin_port, PORT)

    def test_text_and_bytes_on_the_wire(self) -> None:
        _, client, server_data = self.make_connection()
        self.assertEqual(fdsock.send(client, "abc"), 3)
        self.assertEqual(fdsock.send(client, [97, 98, 99]), 3)
        self.assertEqual(fdsock.send(client, b"abc"), 3)
        data = b""
        while len(data) < 9:
            chunk, count = fdsock.recv(server_data, 100)
            self.assertGreater(count, 0)
            data += chunk
        self.assertEqual(data, b"abcabcabc")

    def test_binary_roundtrip(self) -> None:
        _, client, server_data = self.make_connection()
        payload = bytes(range(256))
        self.assertEqual(fdsock.send(client, payload), len(payload))
        data, count = fdsock.recv(server_data, len(payload), MSG.WAITALL)
        self.assertEqual(count, len(payload))
        self.assertEqual(data, payload)

    def test_recv_truncates_to_request(self) -> None:
        _, client, server_data = self.make_connection()
        fdsock.send(client, b"0123456789")
        data, count = fdsock.recv(server_data, 4, MSG.WAITALL)
        self.assertEqual((data, count), (b"0123", 4))
        data, count = fdsock.recv(server_data, 0)
        self.assertEqual((data, count), (b"", 0))
        data, count = fdsock.recv(server_data, 6, MSG.WAITALL)
        self.assertEqual((data, count), (b"456789", 6))

    def test_peek(self) -> None:
        _, client, server_data = self.make_connection()
        fdsock.send(client, b"peekaboo")
        peeked, _ = fdsock.recv(server_data, 8, MSG.PEEK | MSG.WAITALL)
        data, _ = fdsock.recv(server_data, 8, MSG.WAITALL)
        self.assertEqual(peeked, b"peekaboo")
        self.assertEqual(data, b"peekaboo")

    def test_recv_nonblocking_without_data(self) -> None:
        if not hasattr(MSG, 'DONTWAIT'):
            self.skipTest("MSG_DONTWAIT not supported on this platform")
        _, client, server_data = self.make_connection()
        with self.assertLogs("fdsock.api", logging.WARNING):
            data, count = fdsock.recv(server_data, 100, MSG.DONTWAIT)
        self.assertEqual((data, count), (b"", -1))

    def test_recv_peer_closed(self) -> None:
        _, client, server_data = self.make_connection()
        self.disconnect(client)
        data, count = fdsock.recv(server_data, 100)
        self.assertEqual((data, count), (b"", 0))

    def test_option_roundtrip(self) -> None:
        sock = self.make_socket()
        for value in [1, 0]:
            fdsock.setsockopt(sock, SOL.SOCKET, SO.REUSEADDR, value)
            self.assertEqual(fdsock.getsockopt(sock, SOL.SOCKET, SO.REUSEADDR), value)

    def test_wide_options_are_refused(self) -> None:
        if WINDOWS:
            self.skipTest("struct linger is 4 bytes on Windows")
        sock = self.make_socket()
        for opt in [socket.SO_LINGER, socket.SO_RCVTIMEO]:
            with self.subTest(opt=opt):
                with self.assertRaisesRegex(OptionWidthError, "getsockopt: .*got (8|16) bytes"):
                    fdsock.getsockopt(sock, SOL.SOCKET, opt)

    def test_disconnect_twice(self) -> None:
        sock = fdsock.socket()
        self.assertEqual(fdsock.disconnect(sock), 0)
        self.assertEqual(fdsock.disconnect(sock), 0)

    def test_bad_handle_is_an_os_error(self) -> None:
        sock = fdsock.socket()
        fdsock.disconnect(sock)
        with self.assertRaises(SocketError) as cm:
            fdsock.listen(sock, 1)
        self.assertEqual(cm.exception.errno, errno.EBADF)

    def test_connect_refused(self) -> None:
        # bound but never listening, so nobody will answer
        bound = self.make_socket()
        fdsock.setsockopt(bound, SOL.SOCKET, SO.REUSEADDR, 1)
        fdsock.bind(bound, PORT)
        client = self.make_socket()
        with self.assertRaises(SocketError) as cm:
            fdsock.connect(client, {"addr": "127.0.0.1", "port": PORT})
        self.assertEqual(cm.exception.operation, "connect")

    def test_bind_in_use(self) -> None:
        self.make_server()
        other = self.make_socket()
        with self.assertRaises(SocketError) as cm:
            fdsock.bind(other, PORT)
        self.assertEqual(cm.exception.errno, errno.EADDRINUSE)

    def test_datagram_socket(self) -> None:
        sock = self.make_socket(AF.INET, SOCK.DGRAM)
        self.assertGreaterEqual(sock, 0)
        self.assertEqual(fdsock.getsockopt(sock, SOL.SOCKET, SO.REUSEADDR), 0)

class TestGethostbyname(TestCase):
    def test_unresolvable_names(self) -> None:
        self.assertEqual(fdsock.gethostbyname("\ud800"), [])
        self.assertEqual(fdsock.gethostbyname("local\x00host"), [])

    def test_localhost(self) -> None:
        self.assertIn("127.0.0.1", fdsock.gethostbyname("localhost"))

    def test_dotted(self) -> None:
        self.assertEqual(fdsock.gethostbyname("192.0.2.7"), ["192.0.2.7"])

    def test_failure_is_empty(self) -> None:
        self.assertEqual(fdsock.gethostbyname("host.that.does.not.exist.invalid"), [])

class TestLocalSocketInterface(TestCase):
    def test_calls_are_logged(self) -> None:
        sysif = LocalSocketInterface()
        with self.assertLogs("fdsock.local", logging.DEBUG) as cm:
            sock = sysif.socket(int(AF.INET), int(SOCK.STREAM), 0)
            sysif.close(sock)
        self.assertIn(f"socket({int(AF.INET)},{int(SOCK.STREAM)},0) -> {sock}", cm.output[0])

    def test_errors_are_oserrors(self) -> None:
        sysif = LocalSocketInterface()
        sock = sysif.socket(AF.INET, SOCK.STREAM, 0)
        sysif.close(sock)
        with self.assertRaises(OSError) as cm:
            sysif.close(sock)
        self.assertEqual(cm.exception.errno, errno.EBADF)

    def test_error_text(self) -> None:
        if WINDOWS:
            self.assertNotIn("Unknown error", socket_strerror(10093))
        else:
            self.assertEqual(socket_strerror(errno.EBADF), os.strerror(errno.EBADF))
