"""
Reference runtime used to exercise generated converters.

Primitive converters use little-endian fixed-size encodings for numbers and
raw UTF-8 for strings; ``Generator`` resolves types from them first and then
from generated creators.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from typing import Any

from binary_codegen.runtime import Allocator, Converter, ConverterCreator, Reader


class _FixedSizeConverter(Converter):
    FORMAT: struct.Struct

    def encode(self, allocator: Allocator, item: Any) -> None:
        allocator.append(self.FORMAT.pack(item))

    def decode(self, span: bytes | bytearray | memoryview) -> Any:
        (value,) = self.FORMAT.unpack(span)
        return value

    # A fixed size is already self-delimiting
    def encode_auto(self, allocator: Allocator, item: Any) -> None:
        self.encode(allocator, item)

    def decode_auto(self, reader: Reader) -> Any:
        return self.decode(reader.read(self.FORMAT.size))


class Int32Converter(_FixedSizeConverter):
    FORMAT = struct.Struct("<i")


class Float64Converter(_FixedSizeConverter):
    FORMAT = struct.Struct("<d")


class StringConverter(Converter[str]):
    def encode(self, allocator: Allocator, item: str) -> None:
        allocator.append(item.encode("utf-8"))

    def decode(self, span: bytes | bytearray | memoryview) -> str:
        return bytes(span).decode("utf-8")


class Generator:
    """Minimal GeneratorContext: primitive converters plus a list of creators."""

    def __init__(self, creators: Iterable[ConverterCreator] = ()):
        self.creators = list(creators)
        self._converters: dict[Any, Converter] = {
            int: Int32Converter(),
            float: Float64Converter(),
            str: StringConverter(),
        }

    def get_converter(self, type_: Any) -> Converter:
        converter = self._converters.get(type_)
        if converter is not None:
            return converter
        for creator in self.creators:
            converter = creator.get_converter(self, type_)
            if converter is not None:
                self._converters[type_] = converter
                return converter
        raise LookupError(f"No converter for {type_!r}")
