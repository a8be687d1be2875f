"""Tests for the hex storage helpers."""
import pytest

from navigator_passworder.exceptions import InvalidInput, MalformedHex
from navigator_passworder.storage import (
    serialize_buffer_for_storage,
    serialize_buffer_from_storage,
)


class TestSerializeForStorage:
    """Tests for serialize_buffer_for_storage()."""

    def test_empty_buffer(self):
        assert serialize_buffer_for_storage(b"") == "0x"

    def test_lowercase_two_digits_per_byte(self):
        assert serialize_buffer_for_storage(bytes([0, 1, 15, 16, 171, 255])) == "0x00010f10abff"

    def test_accepts_bytearray_and_int_list(self):
        assert serialize_buffer_for_storage(bytearray(b"\x0a\x0b")) == "0x0a0b"
        assert serialize_buffer_for_storage([10, 11]) == "0x0a0b"
        assert serialize_buffer_for_storage(memoryview(b"\x0c")) == "0x0c"

    def test_out_of_range_values(self):
        with pytest.raises(InvalidInput):
            serialize_buffer_for_storage([256])

    @pytest.mark.parametrize("value", ["abc", 5, None])
    def test_non_buffers_rejected(self, value):
        with pytest.raises(InvalidInput):
            serialize_buffer_for_storage(value)


class TestSerializeFromStorage:
    """Tests for serialize_buffer_from_storage()."""

    def test_prefixed(self):
        assert serialize_buffer_from_storage("0x00010f10abff") == bytes([0, 1, 15, 16, 171, 255])

    def test_unprefixed(self):
        assert serialize_buffer_from_storage("abff") == b"\xab\xff"

    def test_uppercase_digits(self):
        assert serialize_buffer_from_storage("0xABFF") == b"\xab\xff"

    def test_empty(self):
        assert serialize_buffer_from_storage("0x") == b""
        assert serialize_buffer_from_storage("") == b""

    def test_round_trip(self):
        buffer = bytes(range(256))
        assert serialize_buffer_from_storage(serialize_buffer_for_storage(buffer)) == buffer

    @pytest.mark.parametrize("value", ["0xabc", "a", "0xzz", "0x12 4", "ab\n", "0x0x12", "+1"])
    def test_malformed(self, value):
        with pytest.raises(MalformedHex):
            serialize_buffer_from_storage(value)

    def test_non_string_rejected(self):
        with pytest.raises(MalformedHex):
            serialize_buffer_from_storage(b"0x12")
