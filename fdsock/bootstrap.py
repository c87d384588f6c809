"""One-time initialization of the platform's socket subsystem

Windows won't create sockets until WSAStartup has been called; everywhere
else there's nothing to do. Either way we only try once per Bootstrap: if
the first attempt fails, that failure is what every later attempt sees too.

"""
from __future__ import annotations
from fdsock.errors import BootstrapError
import threading
import typing as t
import logging
if t.TYPE_CHECKING:
    from fdsock.sysif import SocketInterface

__all__ = [
    "Bootstrap",
]

logger = logging.getLogger(__name__)

class Bootstrap:
    """A guarded, init-once flag for one socket subsystem.

    The flag is set on the first call to `ensure` and never cleared.

    """
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.initialized = False
        self._failure: t.Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self._failure is not None

    def ensure(self, sysif: SocketInterface, operation: str="socket") -> None:
        """Start the socket subsystem behind `sysif` if that hasn't been attempted yet

        Raises BootstrapError if startup failed, on this call or any earlier one.

        """
        with self._lock:
            if not self.initialized:
                try:
                    sysif.startup()
                except Exception as exn:
                    logger.error("socket subsystem startup failed: %s", exn)
                    self._failure = exn
                self.initialized = True
        failure = self._failure
        if isinstance(failure, OSError):
            raise BootstrapError(operation, failure.errno or 0, failure.strerror) from failure
        elif failure is not None:
            raise BootstrapError(operation, 0, f"{type(failure).__name__}: {failure}") from failure
