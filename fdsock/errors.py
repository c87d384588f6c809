"""Exceptions raised by fdsock

There are two kinds of hard failure, which callers will usually want to
tell apart: the arguments were bad, and we never talked to the OS
(ArgumentError); or the OS call was made and failed (SocketError, which is
an OSError carrying the errno).

Some outcomes aren't failures at all: recv returning -1 for "no data right
now", for example. Those are returned, not raised; see `fdsock.api`.

"""
from __future__ import annotations
import os
import typing as t

__all__ = [
    "ArgumentError",
    "OptionWidthError",
    "SocketError",
    "HostResolutionError",
    "BootstrapError",
    "UnsupportedError",
    "UnknownConstantError",
]

class ArgumentError(ValueError):
    """An argument couldn't be converted to what the socket call needs.

    Raised before any OS call is attempted, with one exception: an option
    value of the wrong width (OptionWidthError) only shows up in what
    getsockopt hands back. The message starts with the name of the operation
    and names the offending parameter.

    """
    pass

class OptionWidthError(ArgumentError):
    "getsockopt returned an option value which isn't a 4-byte integer; the call itself succeeded"
    pass

class SocketError(OSError):
    """An OS socket call failed.

    `operation` is the name of the call which failed; `errno` and `strerror`
    are as for any other OSError.

    """
    def __init__(self, operation: str, errno: int, strerror: t.Optional[str]=None) -> None:
        if strerror is None:
            strerror = os.strerror(errno)
        super().__init__(errno, strerror)
        self.operation = operation

    @classmethod
    def from_oserror(cls, operation: str, exn: OSError) -> SocketError:
        return cls(operation, exn.errno or 0, exn.strerror)

    def __str__(self) -> str:
        return f"{self.operation} failed with error {self.errno} ({self.strerror})"

class HostResolutionError(SocketError):
    "Looking up the host name for a connect returned no addresses"
    def __init__(self, operation: str, hostname: str) -> None:
        super().__init__(operation, 0, "host name lookup failure")
        self.hostname = hostname

    def __str__(self) -> str:
        return f"{self.operation}: error in gethostbyname() for {self.hostname!r}"

class BootstrapError(SocketError):
    "The platform's socket subsystem couldn't be started; no sockets can be created"
    def __str__(self) -> str:
        return f"{self.operation}: could not initialize socket library: error {self.errno} ({self.strerror})"

class UnsupportedError(Exception):
    "A constant or address family which exists, but not on this platform"
    pass

class UnknownConstantError(LookupError):
    "A constant name which isn't in the registry on any platform"
    pass
