"""Socket calls made directly in the local Python interpreter thread.

This is the only SocketInterface which actually talks to an operating
system. It's stateless; the one piece of process-wide state, whether the
Windows socket library has been started, lives in `local_bootstrap`.

"""
from __future__ import annotations
from fdsock._raw import ffi, lib, WINDOWS, INVALID_SOCKET
from fdsock.bootstrap import Bootstrap
from fdsock.constants import AF
from fdsock.netinet import SockaddrIn
from fdsock.sysif import SocketInterface, Call
import ipaddress
import logging
import os
import typing as t

__all__ = [
    "LocalSocketInterface",
    "local_interface",
    "local_bootstrap",
]

logger = logging.getLogger(__name__)

# the largest address we might get back from accept; this is
# sizeof(struct sockaddr_storage) on every platform we know of
SOCKADDR_STORAGE_SIZE = 128

def _last_error() -> int:
    if WINDOWS:
        return lib.WSAGetLastError()
    return ffi.errno

if WINDOWS:
    import ctypes
    # WSA codes are unknown to the C runtime's strerror
    def socket_strerror(err: int) -> str:
        return ctypes.FormatError(err).strip()
else:
    socket_strerror = os.strerror

class LocalSocketInterface(SocketInterface):
    "Makes socket calls in the local, Python interpreter thread."
    def __init__(self) -> None:
        self.logger = logger

    def _check(self, call: Call, result: int, failure: int=-1) -> int:
        "Raise an OSError if `result` is the failure value for this call"
        if result == failure:
            err = _last_error()
            exn = OSError(err, socket_strerror(err))
            self.logger.debug("%s -> %s", call, exn)
            raise exn
        self.logger.debug("%s -> %s", call, result)
        return result

    def startup(self) -> None:
        if not WINDOWS:
            return
        # WSADATA is a few hundred bytes; we never look inside it
        wsadata = ffi.new('char[]', 1024)
        call = Call("WSAStartup", (0x0202,))
        err = lib.WSAStartup(0x0202, wsadata)
        if err != 0:
            exn = OSError(err, socket_strerror(err))
            self.logger.debug("%s -> %s", call, exn)
            raise exn
        self.logger.debug("%s -> %s", call, err)

    def socket(self, domain: int, type: int, protocol: int) -> int:
        call = Call("socket", (domain, type, protocol))
        return self._check(call, lib.socket(domain, type, protocol), INVALID_SOCKET)

    def connect(self, sockfd: int, addr: SockaddrIn) -> None:
        call = Call("connect", (sockfd, addr))
        data = addr.to_bytes()
        self._check(call, lib.connect(sockfd, ffi.cast('struct sockaddr*', ffi.from_buffer(data)), len(data)))

    def close(self, sockfd: int) -> None:
        call = Call("close", (sockfd,))
        if WINDOWS:
            self._check(call, lib.closesocket(sockfd))
        else:
            self._check(call, lib.close(sockfd))

    def gethostbyname(self, name: str) -> t.Optional[t.List[ipaddress.IPv4Address]]:
        call = Call("gethostbyname", (name,))
        hostent = lib.gethostbyname(name.encode())
        if hostent == ffi.NULL:
            self.logger.debug("%s -> NULL", call)
            return None
        addrs: t.List[ipaddress.IPv4Address] = []
        # the result lives in static storage, so copy everything out now
        if hostent.h_addrtype == AF.INET and hostent.h_length == 4:
            i = 0
            while hostent.h_addr_list[i] != ffi.NULL:
                addrs.append(ipaddress.IPv4Address(bytes(ffi.buffer(hostent.h_addr_list[i], 4))))
                i += 1
        self.logger.debug("%s -> %s", call, addrs)
        return addrs

    def send(self, sockfd: int, data: bytes, flags: int) -> int:
        call = Call("send", (sockfd, f"<{len(data)} bytes>", flags))
        return self._check(call, lib.send(sockfd, ffi.from_buffer(data), len(data), flags))

    def recv(self, sockfd: int, count: int, flags: int) -> bytes:
        call = Call("recv", (sockfd, count, flags))
        buf = ffi.new('char[]', max(count, 1))
        ret = self._check(call, lib.recv(sockfd, buf, count, flags))
        return bytes(ffi.buffer(buf, ret))

    def bind(self, sockfd: int, addr: SockaddrIn) -> None:
        call = Call("bind", (sockfd, addr))
        data = addr.to_bytes()
        self._check(call, lib.bind(sockfd, ffi.cast('struct sockaddr*', ffi.from_buffer(data)), len(data)))

    def listen(self, sockfd: int, backlog: int) -> None:
        call = Call("listen", (sockfd, backlog))
        self._check(call, lib.listen(sockfd, backlog))

    def accept(self, sockfd: int) -> t.Tuple[int, bytes]:
        call = Call("accept", (sockfd,))
        buf = ffi.new('char[]', SOCKADDR_STORAGE_SIZE)
        buflen = ffi.new('socklen_t*', SOCKADDR_STORAGE_SIZE)
        fd = self._check(call, lib.accept(sockfd, ffi.cast('struct sockaddr*', buf), buflen), INVALID_SOCKET)
        return fd, bytes(ffi.buffer(buf, min(buflen[0], SOCKADDR_STORAGE_SIZE)))

    def setsockopt(self, sockfd: int, level: int, optname: int, optval: bytes) -> None:
        call = Call("setsockopt", (sockfd, level, optname, optval))
        self._check(call, lib.setsockopt(sockfd, level, optname, ffi.from_buffer(optval), len(optval)))

    def getsockopt(self, sockfd: int, level: int, optname: int, optlen: int) -> bytes:
        call = Call("getsockopt", (sockfd, level, optname, optlen))
        buf = ffi.new('char[]', optlen)
        buflen = ffi.new('socklen_t*', optlen)
        self._check(call, lib.getsockopt(sockfd, level, optname, buf, buflen))
        # buflen now holds the option's real width; an option wider than the
        # buffer still comes back at a width the caller can see is wrong
        return bytes(ffi.buffer(buf, min(buflen[0], optlen)))

local_interface = LocalSocketInterface()
local_bootstrap = Bootstrap()
