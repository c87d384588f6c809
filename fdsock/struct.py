"Fixed-size native values which socket calls take and return as raw bytes"
from __future__ import annotations
import abc
import struct
import typing as t

__all__ = [
    "Struct",
    "Int32",
]

_c_int = struct.Struct('i')

class Struct:
    "A native value with a fixed in-memory layout of `sizeof()` bytes"
    @abc.abstractmethod
    def to_bytes(self) -> bytes:
        "The bytes handed to the OS for this value"
        pass

    T_struct = t.TypeVar('T_struct', bound='Struct')
    @classmethod
    @abc.abstractmethod
    def from_bytes(cls: t.Type[T_struct], data: bytes) -> T_struct:
        "Parse a value out of the first `sizeof()` bytes the OS handed back"
        pass

    @classmethod
    @abc.abstractmethod
    def sizeof(cls) -> int:
        pass

# int already has to_bytes and from_bytes with other signatures
class Int32(Struct, int): # type: ignore
    """A C int, the only option value width setsockopt and getsockopt handle

    Stays a plain int to callers; only its byte form is native-endian.

    """
    MIN = -2**31
    MAX = 2**31 - 1

    def to_bytes(self) -> bytes: # type: ignore
        return _c_int.pack(self)

    T = t.TypeVar('T', bound='Int32')
    @classmethod
    def from_bytes(cls: t.Type[T], data: bytes) -> T: # type: ignore
        if len(data) < _c_int.size:
            raise ValueError(f"need {_c_int.size} bytes for a C int, got {len(data)}")
        value, = _c_int.unpack_from(data)
        return cls(value)

    @classmethod
    def sizeof(cls) -> int:
        return _c_int.size
