"""The socket operations, as called by the host

Each method of `Sockets` is one socket verb. It converts its arguments with
`fdsock.convert`, makes exactly one call through its SocketInterface (connect
also looks the host name up first), and turns the outcome into a return value
or an exception.

Hard failures are exceptions: ArgumentError before any OS call is made,
SocketError when the OS call fails. A few operations instead report their
outcome as a status, because the "failures" there are routine:

- send returns -1 if the OS refused the data,
- recv returns a count of -1 for errors, including "no data right now" on a
  non-blocking read, and 0 when the peer has shut down,
- gethostbyname returns an empty list when the lookup fails,
- disconnect returns 0 whenever the handle was a valid integer, whether or
  not the OS managed to close anything, and -1 otherwise.

"""
from __future__ import annotations
from fdsock.bootstrap import Bootstrap
from fdsock.constants import AF, SOCK
from fdsock.errors import ArgumentError, OptionWidthError, SocketError, HostResolutionError
from fdsock.netinet import SockaddrIn, INADDR_ANY
from fdsock.struct import Int32
from fdsock.sysif import SocketInterface
from fdsock.types import PeerInfo, Received
import fdsock.convert as convert
import builtins
import logging
import typing as t

__all__ = [
    "Sockets",
]

logger = logging.getLogger(__name__)

# bigger than any option value an OS hands back, so a wide option is
# reported at its true width instead of being cut down to 4 bytes
OPTION_BUFFER_SIZE = 128

class Sockets:
    """The socket operations, performed through one SocketInterface

    Holds no state of its own besides the Bootstrap for its interface;
    socket handles belong to the OS, and are never tracked here.

    """
    def __init__(self, sysif: SocketInterface, bootstrap: t.Optional[Bootstrap]=None) -> None:
        self.sysif = sysif
        self.bootstrap = bootstrap if bootstrap is not None else Bootstrap()

    def socket(self, domain: t.Any=AF.INET, type: t.Any=SOCK.STREAM, protocol: t.Any=0) -> int:
        """Create a socket, returning its handle

        `domain` is an address family such as AF_INET, and `type` a socket type
        such as SOCK_STREAM; together they give a TCP socket, which is the
        default. `protocol` is currently not used and must be 0 if specified.

        manpage: socket(2)
        """
        domain = convert.scalar_int(domain, "socket", "DOMAIN")
        type = convert.scalar_int(type, "socket", "TYPE")
        protocol = convert.scalar_int(protocol, "socket", "PROTOCOL")
        if protocol != 0:
            raise ArgumentError("socket: for now, PROTOCOL must always be 0 (zero)")
        self.bootstrap.ensure(self.sysif, "socket")
        try:
            return self.sysif.socket(domain, type, protocol)
        except OSError as exn:
            raise SocketError.from_oserror("socket", exn) from exn

    def connect(self, s: t.Any, serverinfo: t.Any) -> int:
        """Connect the socket `s` to the host and port in `serverinfo`

        `serverinfo` has the fields "addr", a host name or address to connect
        to, and "port". The name is looked up, and we connect to the first
        address it resolves to. Returns 0 on success.

        manpage: connect(2)
        """
        sockfd = convert.handle(s, "connect")
        endpoint = convert.endpoint(serverinfo, "connect")
        addrs = self.sysif.gethostbyname(endpoint.addr)
        if not addrs:
            raise HostResolutionError("connect", endpoint.addr)
        try:
            self.sysif.connect(sockfd, SockaddrIn(endpoint.port, addrs[0]))
        except OSError as exn:
            raise SocketError.from_oserror("connect", exn) from exn
        return 0

    def disconnect(self, s: t.Any) -> int:
        """Close the socket `s`

        This never raises. It returns 0 if `s` is a valid handle, even if the
        OS couldn't close it (say, because it was already closed), and -1 if
        `s` isn't a handle at all.

        """
        try:
            sockfd = convert.handle(s, "disconnect")
        except ArgumentError as exn:
            logger.debug("%s", exn)
            return -1
        try:
            self.sysif.close(sockfd)
        except OSError as exn:
            logger.debug("disconnect: closing %d failed: %s", sockfd, exn)
        return 0

    def gethostbyname(self, hostname: t.Any) -> t.List[str]:
        """Return the IPv4 addresses for `hostname`, in 127.0.0.1 form

        A failed lookup gives an empty list rather than an error.

        manpage: gethostbyname(3)
        """
        if not isinstance(hostname, str) or not hostname:
            raise ArgumentError("gethostbyname: HOSTNAME must be a non-empty string")
        if not convert.resolvable(hostname):
            # no resolver could ever find such a name
            logger.debug("gethostbyname: %r can not be passed to the resolver", hostname)
            return []
        addrs = self.sysif.gethostbyname(hostname)
        if addrs is None:
            return []
        return convert.dotted(addrs)

    def send(self, s: t.Any, data: t.Any, flags: t.Any=0) -> int:
        """Send `data` on the socket `s`, returning the number of bytes sent

        `data` is either a string, which is sent UTF-8 encoded, or a sequence
        of bytes. If the OS won't take the data, returns -1.

        manpage: send(2)
        """
        flags = convert.scalar_int(flags, "send", "FLAGS")
        sockfd = convert.handle(s, "send")
        buf = convert.payload(data, "send").to_bytes()
        try:
            return self.sysif.send(sockfd, buf, flags)
        except OSError as exn:
            logger.warning("send error %i (%s)", exn.errno, exn.strerror)
            return -1

    def recv(self, s: t.Any, len: t.Any, flags: t.Any=0) -> Received:
        """Read up to `len` bytes from the socket `s`

        Returns the data read and the count; see Received. Pass MSG_DONTWAIT in
        `flags` to return immediately when there's no data, with a count of -1.

        manpage: recv(2)
        """
        flags = convert.scalar_int(flags, "recv", "FLAGS")
        sockfd = convert.handle(s, "recv")
        count = convert.scalar_int(len, "recv", "LEN", minimum=0)
        try:
            data = self.sysif.recv(sockfd, count, flags)
        except OSError as exn:
            logger.warning("recv error %i (%s)", exn.errno, exn.strerror)
            return Received(b"", -1)
        return Received(data, builtins.len(data))

    def bind(self, s: t.Any, port: t.Any) -> int:
        """Bind the socket `s` to `port` on all local addresses. Returns 0 on success.

        manpage: bind(2)
        """
        sockfd = convert.handle(s, "bind")
        portnum = convert.port(port, "bind")
        try:
            self.sysif.bind(sockfd, SockaddrIn(portnum, INADDR_ANY))
        except OSError as exn:
            raise SocketError.from_oserror("bind", exn) from exn
        return 0

    def listen(self, s: t.Any, backlog: t.Any) -> int:
        """Listen for connections on the socket `s`. Returns 0 on success.

        `backlog` is how long the queue of pending connections may grow.

        manpage: listen(2)
        """
        sockfd = convert.handle(s, "listen")
        backlog = convert.scalar_int(backlog, "listen", "BACKLOG")
        try:
            self.sysif.listen(sockfd, backlog)
        except OSError as exn:
            raise SocketError.from_oserror("listen", exn) from exn
        return 0

    def accept(self, s: t.Any) -> t.Tuple[int, PeerInfo]:
        """Accept a connection on the listening socket `s`

        Returns the new socket's handle and a description of the peer.
        Blocks until there's a connection to accept.

        manpage: accept(2)
        """
        sockfd = convert.handle(s, "accept")
        try:
            fd, addr = self.sysif.accept(sockfd)
        except OSError as exn:
            raise SocketError.from_oserror("accept", exn) from exn
        return fd, convert.peer_info(addr)

    def setsockopt(self, s: t.Any, level: t.Any, opt: t.Any, value: t.Any) -> None:
        """Set the integer option `opt` at `level` on the socket `s` to `value`

        Only SOL_SOCKET is really supported for `level`, with SO_DEBUG or
        SO_REUSEADDR for `opt`, but any option with a 4-byte integer value will work.

        manpage: setsockopt(2)
        """
        sockfd = convert.handle(s, "setsockopt")
        level = convert.scalar_int(level, "setsockopt", "LEVEL")
        opt = convert.scalar_int(opt, "setsockopt", "OPT")
        optval = Int32(convert.scalar_int(value, "setsockopt", "VALUE"))
        try:
            self.sysif.setsockopt(sockfd, level, opt, optval.to_bytes())
        except OSError as exn:
            raise SocketError.from_oserror("setsockopt", exn) from exn

    def getsockopt(self, s: t.Any, level: t.Any, opt: t.Any) -> int:
        """Return the value of the integer option `opt` at `level` on the socket `s`

        manpage: getsockopt(2)
        """
        sockfd = convert.handle(s, "getsockopt")
        level = convert.scalar_int(level, "getsockopt", "LEVEL")
        opt = convert.scalar_int(opt, "getsockopt", "OPT")
        try:
            data = self.sysif.getsockopt(sockfd, level, opt, OPTION_BUFFER_SIZE)
        except OSError as exn:
            raise SocketError.from_oserror("getsockopt", exn) from exn
        if builtins.len(data) != Int32.sizeof():
            raise OptionWidthError(
                f"getsockopt: currently only int arguments are available for optval, got {builtins.len(data)} bytes")
        return int(Int32.from_bytes(data))

