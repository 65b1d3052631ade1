"""
Runtime contract targeted by generated converters.

Generated modules subclass ``Converter`` and ``ConverterCreator`` and use
``Allocator`` and ``Reader`` to move bytes. Converters for primitive types
are not defined here; they are supplied by the application through a
``GeneratorContext``.
"""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")

# Length prefix written by the default encode_auto
_LENGTH_PREFIX = struct.Struct("<I")


class DecodeUnsupportedError(NotImplementedError):
    """Raised by converters that can encode a type but not rebuild it."""

    def __init__(self, target: Any):
        self.target = target
        name = getattr(target, "__qualname__", None) or repr(target)
        super().__init__(f"Decoding is not supported for type '{name}'")


class Allocator:
    """Growable output buffer."""

    __slots__ = ("_buffer",)

    def __init__(self):
        self._buffer = bytearray()

    def append(self, data: bytes | bytearray | memoryview) -> None:
        self._buffer += data

    def append_with_length_prefix(self, data: bytes | bytearray | memoryview) -> None:
        self._buffer += _LENGTH_PREFIX.pack(len(data))
        self._buffer += data

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


class Reader:
    """Cursor over a read-only byte region.

    ``read`` consumes an exact number of bytes, ``remaining`` consumes
    whatever is left.
    """

    __slots__ = ("_view", "_position")

    def __init__(self, data: bytes | bytearray | memoryview):
        self._view = memoryview(data)
        self._position = 0

    def __len__(self) -> int:
        return len(self._view) - self._position

    def read(self, length: int) -> memoryview:
        if length < 0 or length > len(self):
            raise EOFError(f"Cannot read {length} bytes, {len(self)} remaining")
        start = self._position
        self._position += length
        return self._view[start : self._position]

    def read_with_length_prefix(self) -> memoryview:
        (length,) = _LENGTH_PREFIX.unpack(self.read(_LENGTH_PREFIX.size))
        return self.read(length)

    def remaining(self) -> memoryview:
        return self.read(len(self))


class Converter(ABC, Generic[T]):
    """Encodes and decodes one type.

    ``encode``/``decode`` own the whole region they are given. The ``_auto``
    pair must be self-delimiting because more data may follow; the default
    implementation wraps ``encode``/``decode`` in a length prefix.
    """

    @abstractmethod
    def encode(self, allocator: Allocator, item: T) -> None:
        """Append ``item`` to ``allocator`` as a whole-remainder region."""

    @abstractmethod
    def decode(self, span: bytes | bytearray | memoryview) -> T:
        """Rebuild an item from a region holding exactly one encoded item."""

    def encode_auto(self, allocator: Allocator, item: T) -> None:
        inner = Allocator()
        self.encode(inner, item)
        allocator.append_with_length_prefix(inner.to_bytes())

    def decode_auto(self, reader: Reader) -> T:
        return self.decode(reader.read_with_length_prefix())

    def encode_to_bytes(self, item: T) -> bytes:
        allocator = Allocator()
        self.encode(allocator, item)
        return allocator.to_bytes()


class GeneratorContext(Protocol):
    """Resolves the converter of a type, used by creators for member types."""

    def get_converter(self, type_: Any) -> Converter: ...


class ConverterCreator(ABC):
    """Factory consulted by a GeneratorContext for types it does not know yet."""

    @abstractmethod
    def get_converter(self, context: GeneratorContext, type_: Any) -> Converter | None:
        """Return a converter for ``type_``, or None if this creator does not handle it."""
