import struct

import pytest

from binary_codegen.descriptors import TypeRef
from binary_codegen.introspection import describe
from binary_codegen.runtime import Allocator, DecodeUnsupportedError
from binary_codegen.tests.models import Scores


class TestEnumerable:
    def test_descriptor(self):
        descriptor = describe(list[int])
        assert descriptor.is_enumerable
        assert descriptor.element_type == TypeRef("builtins", "int")

    def test_elements_are_concatenated(self, generate):
        converter = generate(list[int]).get_converter(list[int])
        assert converter.encode_to_bytes([1, 2, 3]) == struct.pack("<iii", 1, 2, 3)

    def test_strings_are_self_delimiting(self, generate):
        converter = generate(list[str]).get_converter(list[str])
        assert converter.encode_to_bytes(["ab", ""]) == struct.pack("<I", 2) + b"ab" + struct.pack("<I", 0)

    def test_none_and_empty(self, generate):
        converter = generate(list[int]).get_converter(list[int])
        assert converter.encode_to_bytes(None) == b""
        assert converter.encode_to_bytes([]) == b""

    def test_encode_auto_wraps_elements(self, generate):
        converter = generate(list[int]).get_converter(list[int])
        allocator = Allocator()
        converter.encode_auto(allocator, [7])
        assert allocator.to_bytes() == struct.pack("<Ii", 4, 7)

    def test_subclass_of_iterable_generic(self, generate):
        converter = generate(Scores).get_converter(Scores)
        assert converter.encode_to_bytes(Scores([0.5])) == struct.pack("<d", 0.5)

    def test_decode_is_unsupported(self, generate):
        converter = generate(list[int]).get_converter(list[int])
        with pytest.raises(DecodeUnsupportedError):
            converter.decode(struct.pack("<i", 1))
