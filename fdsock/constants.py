"""Named integer constants for socket domains, types, flags and options

The values are the platform's native ones, as exported by Python's own
`socket` module; they never change while the process runs.

Each name is available in three ways: as an enum member (`AF.INET`), as a
plain module attribute (`AF_INET`), and through the registry query
`lookup("AF_INET")`. Only `lookup` distinguishes between a name we have
never heard of and a name that exists but isn't available on this platform.

"""
from __future__ import annotations
from fdsock.errors import UnsupportedError, UnknownConstantError
import enum
import socket
import sys
import types
import typing as t

__all__ = [
    "AF",
    "SOCK",
    "MSG",
    "SOL",
    "SO",
    "TABLE",
    "lookup",
    "supported",
]

POSIX = sys.platform != 'win32'

class AF(enum.IntEnum):
    "Address families"
    if POSIX:
        UNIX = socket.AF_UNIX
        LOCAL = socket.AF_UNIX
    INET = socket.AF_INET
    APPLETALK = socket.AF_APPLETALK

class SOCK(enum.IntEnum):
    "Socket types"
    STREAM = socket.SOCK_STREAM
    DGRAM = socket.SOCK_DGRAM
    SEQPACKET = socket.SOCK_SEQPACKET
    RAW = socket.SOCK_RAW
    RDM = socket.SOCK_RDM

class MSG(enum.IntFlag):
    "Flags for send and recv"
    NONE = 0
    PEEK = socket.MSG_PEEK
    if hasattr(socket, 'MSG_DONTWAIT'):
        DONTWAIT = socket.MSG_DONTWAIT
    if hasattr(socket, 'MSG_WAITALL'):
        WAITALL = socket.MSG_WAITALL

class SOL(enum.IntEnum):
    """Stands for Sock Opt Level

    This is what should be passed as the "level" argument to
    getsockopt/setsockopt.

    """
    SOCKET = socket.SOL_SOCKET

class SO(enum.IntEnum):
    DEBUG = socket.SO_DEBUG
    REUSEADDR = socket.SO_REUSEADDR

def _build_table() -> t.Dict[str, int]:
    table: t.Dict[str, int] = {}
    for prefix, cls in [("AF_", AF), ("SOCK_", SOCK), ("MSG_", MSG), ("SOL_", SOL), ("SO_", SO)]:
        # __members__ includes aliases, which is how AF_LOCAL gets in
        for name, member in cls.__members__.items():
            if cls is MSG and name == "NONE":
                continue
            table[prefix + name] = int(member)
    return table

TABLE: t.Mapping[str, int] = types.MappingProxyType(_build_table())

# names which exist, but not everywhere
_PLATFORM_CONDITIONAL: t.Dict[str, str] = {
    "AF_UNIX": "AF_UNIX address family not supported on this platform",
    "AF_LOCAL": "AF_LOCAL address family not supported on this platform",
    "MSG_DONTWAIT": "MSG_DONTWAIT flag not supported on this platform",
    "MSG_WAITALL": "MSG_WAITALL flag not supported on this platform",
}

def lookup(name: str) -> int:
    """Return the native value of the constant called `name`

    Raises UnsupportedError if the constant exists but not on this platform,
    and UnknownConstantError if we don't know about it at all. A value of zero
    is a perfectly good value, not a failure.

    """
    try:
        return TABLE[name]
    except KeyError:
        pass
    if name in _PLATFORM_CONDITIONAL:
        raise UnsupportedError(_PLATFORM_CONDITIONAL[name])
    raise UnknownConstantError(name)

def supported(name: str) -> bool:
    "Whether `name` is a known constant which is available on this platform"
    return name in TABLE

# plain module attributes, for callers who prefer AF_INET to AF.INET
globals().update(TABLE)
__all__ += list(TABLE)
