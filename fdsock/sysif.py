"""The lowest-level interface for making socket calls

Every call into the operating system's socket API goes through an object
matching SocketInterface, and nothing else in fdsock touches the OS. That
makes this the place to substitute a fake OS for testing: hand a different
SocketInterface to `fdsock.api.Sockets`, and you can observe (or forbid)
every call that would have been made.

The arguments here are already native: integers, bytes, and address
structures. Converting host values into these is the job of
`fdsock.convert`, and deciding what a failure means to the caller is the
job of `fdsock.api`.

"""
from __future__ import annotations
from dataclasses import dataclass
from fdsock.netinet import SockaddrIn
import abc
import ipaddress
import typing as t

__all__ = [
    "SocketInterface",
    "Call",
    "SocketInterfaceError",
    "UnusableSocketInterface",
]

class SocketInterface:
    """An object which lets us make socket calls on some operating system.

    Each method performs exactly one OS primitive. Methods which correspond to
    a failing OS call raise OSError with the errno the OS reported; they never
    return an error indicator.

    """
    @abc.abstractmethod
    def startup(self) -> None:
        """Initialize the socket subsystem, on platforms which need it.

        Callers are responsible for calling this only once; see
        `fdsock.bootstrap.Bootstrap`.

        """
        pass

    @abc.abstractmethod
    def socket(self, domain: int, type: int, protocol: int) -> int:
        "manpage: socket(2)"
        pass

    @abc.abstractmethod
    def connect(self, sockfd: int, addr: SockaddrIn) -> None:
        "manpage: connect(2)"
        pass

    @abc.abstractmethod
    def close(self, sockfd: int) -> None:
        "manpage: close(2); closesocket on Windows"
        pass

    @abc.abstractmethod
    def gethostbyname(self, name: str) -> t.Optional[t.List[ipaddress.IPv4Address]]:
        """Look up the IPv4 addresses for `name`, in the resolver's order.

        Returns None if the lookup failed; resolver failures don't set errno,
        so there's nothing to put in an OSError.

        manpage: gethostbyname(3)
        """
        pass

    @abc.abstractmethod
    def send(self, sockfd: int, data: bytes, flags: int) -> int:
        "manpage: send(2)"
        pass

    @abc.abstractmethod
    def recv(self, sockfd: int, count: int, flags: int) -> bytes:
        """Receive at most `count` bytes; an empty result means the peer shut down.

        manpage: recv(2)
        """
        pass

    @abc.abstractmethod
    def bind(self, sockfd: int, addr: SockaddrIn) -> None:
        "manpage: bind(2)"
        pass

    @abc.abstractmethod
    def listen(self, sockfd: int, backlog: int) -> None:
        "manpage: listen(2)"
        pass

    @abc.abstractmethod
    def accept(self, sockfd: int) -> t.Tuple[int, bytes]:
        """Accept a connection, returning the new socket and the peer's serialized struct sockaddr

        manpage: accept(2)
        """
        pass

    @abc.abstractmethod
    def setsockopt(self, sockfd: int, level: int, optname: int, optval: bytes) -> None:
        "manpage: setsockopt(2)"
        pass

    @abc.abstractmethod
    def getsockopt(self, sockfd: int, level: int, optname: int, optlen: int) -> bytes:
        """Get an option into a buffer of `optlen` bytes, returning as many bytes as the OS filled in

        manpage: getsockopt(2)
        """
        pass

@dataclass
class Call:
    "A record of one socket call, for logging"
    name: str
    args: t.Tuple[t.Any, ...]

    def __str__(self) -> str:
        return f"{self.name}({','.join(map(str, self.args))})"

    def __repr__(self) -> str:
        return str(self)

class SocketInterfaceError(Exception):
    """We can't make socket calls through this interface at all.

    We know for sure that the call was not made.
    """
    pass

class UnusableSocketInterface(SocketInterface):
    "A SocketInterface for situations where no socket call should ever be made"
    def _refuse(self, name: str, *args: t.Any) -> t.NoReturn:
        raise SocketInterfaceError("can't make socket calls through this interface", Call(name, args))

    def startup(self) -> None:
        self._refuse("startup")

    def socket(self, domain: int, type: int, protocol: int) -> int:
        self._refuse("socket", domain, type, protocol)

    def connect(self, sockfd: int, addr: SockaddrIn) -> None:
        self._refuse("connect", sockfd, addr)

    def close(self, sockfd: int) -> None:
        self._refuse("close", sockfd)

    def gethostbyname(self, name: str) -> t.Optional[t.List[ipaddress.IPv4Address]]:
        self._refuse("gethostbyname", name)

    def send(self, sockfd: int, data: bytes, flags: int) -> int:
        self._refuse("send", sockfd, data, flags)

    def recv(self, sockfd: int, count: int, flags: int) -> bytes:
        self._refuse("recv", sockfd, count, flags)

    def bind(self, sockfd: int, addr: SockaddrIn) -> None:
        self._refuse("bind", sockfd, addr)

    def listen(self, sockfd: int, backlog: int) -> None:
        self._refuse("listen", sockfd, backlog)

    def accept(self, sockfd: int) -> t.Tuple[int, bytes]:
        self._refuse("accept", sockfd)

    def setsockopt(self, sockfd: int, level: int, optname: int, optval: bytes) -> None:
        self._refuse("setsockopt", sockfd, level, optname, optval)

    def getsockopt(self, sockfd: int, level: int, optname: int, optlen: int) -> bytes:
        self._refuse("getsockopt", sockfd, level, optname, optlen)
