"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import string

HEX_PREFIX = '0x'

_HEX_DIGITS = frozenset(string.hexdigits)


def int_to_bytes(number: int, size: int, signed: bool = False) -> bytes:
    return number.to_bytes(size, byteorder='big', signed=signed)


def bytes_to_int(data: bytes, *, signed: bool = False) -> int:
    """
    Converts data in bytes to an int. Assumes big-endian format.

    Args:
        data: bytes to be converted
        signed: whether two's complement is used to represent the integer.

    Returns: the converted data as int
    """
    return int.from_bytes(data, byteorder='big', signed=signed)


def strip_hex_prefix(value: str) -> str:
    """Remove the `0x` display prefix, if present.

    >>> strip_hex_prefix('0xdeb4'), strip_hex_prefix('deb4'), strip_hex_prefix('0Xdeb4')
    ('deb4', 'deb4', 'deb4')
    """
    if value[:2].lower() == HEX_PREFIX:
        return value[2:]
    return value


def add_hex_prefix(value: str) -> str:
    """Add the `0x` display prefix unless it is already there.

    >>> add_hex_prefix('deb4'), add_hex_prefix('0xdeb4')
    ('0xdeb4', '0xdeb4')
    """
    if value.startswith(HEX_PREFIX):
        return value
    return HEX_PREFIX + value


def is_hex(value: str) -> bool:
    """True if `value` is a non-empty string of hex digits, without prefix."""
    return bool(value) and all(c in _HEX_DIGITS for c in value)


def parse_hex_str(hex_str: str) -> bytes:
    """Parse a hex string with or without `0x` into bytes."""
    return bytes.fromhex(strip_hex_prefix(hex_str))
