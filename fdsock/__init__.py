"""BSD socket calls on plain integer handles

fdsock exposes the socket API of the operating system (socket, connect,
bind, listen, accept, send, recv, setsockopt, getsockopt, gethostbyname,
and closing via disconnect) to Python callers who want to hold sockets as
bare integers, the way a C program does. It is:

- *thin*: each operation is one call into the OS, with no buffering, no
  retries, and no connection state of its own.
- *checked*: arguments are validated before the OS is involved, and a bad
  argument is an `ArgumentError` naming the parameter, never a crash.
- *honest about statuses*: recv, send, disconnect and gethostbyname report
  routine outcomes (no data yet, peer closed, lookup found nothing) as
  return values; everything else that fails raises.

## Usage

    import fdsock
    server = fdsock.socket(fdsock.AF_INET, fdsock.SOCK_STREAM, 0)
    fdsock.setsockopt(server, fdsock.SOL_SOCKET, fdsock.SO_REUSEADDR, 1)
    fdsock.bind(server, 9001)
    fdsock.listen(server, 1)
    client = fdsock.socket()
    fdsock.connect(client, {"addr": "127.0.0.1", "port": 9001})
    conn, peer = fdsock.accept(server)
    fdsock.send(client, "Hello socket-land!")
    data, count = fdsock.recv(conn, 100)

## Layers

The module-level functions are bound methods of `sockets`, a
`fdsock.api.Sockets` that talks to the local OS through
`fdsock.local.LocalSocketInterface`. To run the same operations against
something else (a fake OS in a test, say) construct your own `Sockets` around
any `fdsock.sysif.SocketInterface`.

Conversion of arguments lives in `fdsock.convert`, the native structures in
`fdsock.netinet` and `fdsock._raw`, the constants in `fdsock.constants`, and
the exceptions in `fdsock.errors`.

"""
from fdsock.api import Sockets
from fdsock.constants import AF, SOCK, MSG, SOL, SO, TABLE
from fdsock.errors import (
    ArgumentError,
    OptionWidthError,
    SocketError,
    HostResolutionError,
    BootstrapError,
    UnsupportedError,
    UnknownConstantError,
)
from fdsock.local import local_interface, local_bootstrap
from fdsock.types import Endpoint, PeerInfo, Received
import fdsock.constants as constants

sockets = Sockets(local_interface, local_bootstrap)

socket = sockets.socket
connect = sockets.connect
disconnect = sockets.disconnect
gethostbyname = sockets.gethostbyname
send = sockets.send
recv = sockets.recv
bind = sockets.bind
listen = sockets.listen
accept = sockets.accept
setsockopt = sockets.setsockopt
getsockopt = sockets.getsockopt

globals().update(TABLE)

__all__ = [
    "Sockets",
    "sockets",
    "socket",
    "connect",
    "disconnect",
    "gethostbyname",
    "send",
    "recv",
    "bind",
    "listen",
    "accept",
    "setsockopt",
    "getsockopt",
    "constants",
    "AF",
    "SOCK",
    "MSG",
    "SOL",
    "SO",
    "Endpoint",
    "PeerInfo",
    "Received",
    "ArgumentError",
    "OptionWidthError",
    "SocketError",
    "HostResolutionError",
    "BootstrapError",
    "UnsupportedError",
    "UnknownConstantError",
] + list(TABLE)
