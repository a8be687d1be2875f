"""Hex helpers for storing raw buffers (key or salt material) next to vaults.

Format: ``0x`` followed by two lowercase hex digits per byte.
"""
import re
from collections.abc import Iterable
from typing import Union

from .exceptions import InvalidInput, MalformedHex

_HEX_PREFIX = "0x"
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


def serialize_buffer_for_storage(buffer: Union[bytes, bytearray, memoryview, Iterable[int]]) -> str:
    """Convert a buffer into a ``0x``-prefixed lowercase hex string.

    Args:
        buffer: bytes-like object or iterable of integers in 0..255.

    Returns:
        Hex string; an empty buffer gives ``"0x"``.

    Raises:
        InvalidInput: If ``buffer`` holds values outside 0..255.
    """
    if isinstance(buffer, (str, int)):
        raise InvalidInput(f"Expected a byte buffer, got {type(buffer).__name__}")
    try:
        raw = bytes(buffer)
    except (TypeError, ValueError) as err:
        raise InvalidInput(f"Cannot serialize buffer: {err}") from err
    return _HEX_PREFIX + raw.hex()


def serialize_buffer_from_storage(value: str) -> bytes:
    """Convert a hex string, with or without ``0x`` prefix, back into bytes.

    Raises:
        MalformedHex: If the string has odd length or non-hex characters.
    """
    if not isinstance(value, str):
        raise MalformedHex(f"Expected a hex string, got {type(value).__name__}")
    digits = value[2:] if value.startswith(_HEX_PREFIX) else value
    if len(digits) % 2:
        raise MalformedHex(f"Hex string has odd length: {len(digits)}")
    if not _HEX_PATTERN.fullmatch(digits):
        raise MalformedHex("Hex string contains non-hex characters")
    return bytes.fromhex(digits)
