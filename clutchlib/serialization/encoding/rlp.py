# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

r"""
This module implements RLP (Recursive Length Prefix), the serialization used by Ethereum and by the ClutchHub ledger.

An item is either a byte string or a list of items, nested to any depth. Unsigned integers are encoded as their
minimal big-endian byte string (zero is the empty string). Headers are:

    [0x00, 0x7f]  a single byte below 0x80 is its own encoding
    [0x80, 0xb7]  byte string of 0-55 bytes, header is 0x80 + length
    [0xb8, 0xbf]  longer byte string, header is 0xb7 + len(length), followed by the big-endian length
    [0xc0, 0xf7]  list whose encoded items take 0-55 bytes, header is 0xc0 + payload length
    [0xf8, 0xff]  longer list, header is 0xf7 + len(length), followed by the big-endian payload length

Note that list headers carry the byte length of the concatenated items, not the number of items. The encoding is
canonical: the decoder rejects any header that isn't the shortest possible one.

>>> rlp_encode(b'dog').hex()
'83646f67'
>>> rlp_encode([b'cat', b'dog']).hex()
'c88363617483646f67'
>>> rlp_encode(0).hex(), rlp_encode(15).hex(), rlp_encode(1024).hex()
('80', '0f', '820400')
>>> rlp_encode([[], [[]], [[], [[]]]]).hex()
'c7c0c1c0c3c0c1c0'

>>> se = Serializer()
>>> encode_rlp(se, [1, [b'\x80']])
>>> se.finalize().hex()
'c401c28180'

>>> de = Deserializer(bytes.fromhex('c401c28180'))
>>> decode_rlp(de)
[b'\x01', [b'\x80']]
>>> de.finalize()

>>> try:
...     rlp_decode(bytes.fromhex('8105'))
... except RLPDecodingError as e:
...     print(*e.args)
single byte below 0x80 must not have a header
"""

from collections.abc import Sequence
from typing import Union

from typing_extensions import TypeAlias

from clutchlib.serialization import Deserializer, SerializationError, Serializer
from clutchlib.serialization.types import Buffer

RLPEncodable: TypeAlias = Union[int, bytes, bytearray, memoryview, Sequence['RLPEncodable']]
RLPItem: TypeAlias = Union[bytes, list['RLPItem']]

SHORT_PAYLOAD_MAX_LENGTH = 55

STRING_OFFSET = 0x80
LONG_STRING_OFFSET = 0xb7
LIST_OFFSET = 0xc0
LONG_LIST_OFFSET = 0xf7

# a long header stores the length of the length in its first byte, which leaves room for at most 8 bytes
_MAX_LENGTH_OF_LENGTH = 8


class RLPEncodingError(TypeError, ValueError):
    """The value given to the encoder is not an unsigned integer, a byte string or a list of those."""


class RLPDecodingError(SerializationError, ValueError):
    """The byte sequence is not a canonical RLP encoding."""


def uint_to_bytes(value: int) -> bytes:
    """Minimal big-endian representation of an unsigned integer, zero is the empty string.

    >>> uint_to_bytes(0), uint_to_bytes(255), uint_to_bytes(256)
    (b'', b'\\xff', b'\\x01\\x00')
    """
    if value < 0:
        raise RLPEncodingError(f'cannot encode negative integer: {value}')
    return value.to_bytes((value.bit_length() + 7) // 8, byteorder='big')


def decode_uint(data: RLPItem) -> int:
    """Convert a decoded byte string back into the unsigned integer it encodes.

    >>> decode_uint(b''), decode_uint(b'\\x04\\x00')
    (0, 1024)
    """
    if not isinstance(data, bytes):
        raise RLPDecodingError('expected a byte string, got a list')
    if data[:1] == b'\x00':
        raise RLPDecodingError('integer must not have leading zeros')
    return int.from_bytes(data, byteorder='big')


def encode_rlp(serializer: Serializer, item: RLPEncodable) -> None:
    """Encode one item (recursively, for lists).

    This module's docstring has more details and examples.
    """
    # bool is an int subclass, but True/False are never valid wire values
    if isinstance(item, bool):
        raise RLPEncodingError('cannot encode a bool, use an int explicitly')
    if isinstance(item, int):
        _encode_string(serializer, uint_to_bytes(item))
    elif isinstance(item, (bytes, bytearray, memoryview)):
        _encode_string(serializer, bytes(item))
    elif isinstance(item, (list, tuple)):
        payload = Serializer()
        for sub_item in item:
            encode_rlp(payload, sub_item)
        _write_header(serializer, payload.cur_pos(), LIST_OFFSET, LONG_LIST_OFFSET)
        serializer.write_bytes(payload.finalize())
    else:
        raise RLPEncodingError(f'cannot encode value of type {type(item).__name__}')


def decode_rlp(deserializer: Deserializer) -> RLPItem:
    """Decode one item, leaving anything after it in the deserializer.

    This module's docstring has more details and examples.
    """
    prefix = deserializer.read_byte()

    if prefix < STRING_OFFSET:
        return bytes([prefix])

    if prefix <= LONG_STRING_OFFSET:
        length = prefix - STRING_OFFSET
        data = bytes(deserializer.read_bytes(length))
        if length == 1 and data[0] < STRING_OFFSET:
            raise RLPDecodingError('single byte below 0x80 must not have a header')
        return data

    if prefix < LIST_OFFSET:
        length = _read_long_length(deserializer, prefix - LONG_STRING_OFFSET)
        return bytes(deserializer.read_bytes(length))

    if prefix <= LONG_LIST_OFFSET:
        length = prefix - LIST_OFFSET
    else:
        length = _read_long_length(deserializer, prefix - LONG_LIST_OFFSET)

    payload = Deserializer(deserializer.read_bytes(length))
    items: list[RLPItem] = []
    while not payload.is_empty():
        items.append(decode_rlp(payload))
    return items


def rlp_encode(item: RLPEncodable) -> bytes:
    """Encode an item and return the resulting bytes."""
    serializer = Serializer()
    encode_rlp(serializer, item)
    return serializer.finalize()


def rlp_decode(data: Buffer) -> RLPItem:
    """Decode a complete RLP byte sequence, trailing bytes are an error."""
    deserializer = Deserializer(data)
    item = decode_rlp(deserializer)
    deserializer.finalize()
    return item


def _encode_string(serializer: Serializer, data: bytes) -> None:
    if len(data) == 1 and data[0] < STRING_OFFSET:
        serializer.write_byte(data[0])
        return
    _write_header(serializer, len(data), STRING_OFFSET, LONG_STRING_OFFSET)
    serializer.write_bytes(data)


def _write_header(serializer: Serializer, length: int, short_offset: int, long_offset: int) -> None:
    if length <= SHORT_PAYLOAD_MAX_LENGTH:
        serializer.write_byte(short_offset + length)
        return
    length_bytes = uint_to_bytes(length)
    if len(length_bytes) > _MAX_LENGTH_OF_LENGTH:
        raise RLPEncodingError('payload is too long to be encoded')
    serializer.write_byte(long_offset + len(length_bytes))
    serializer.write_bytes(length_bytes)


def _read_long_length(deserializer: Deserializer, length_of_length: int) -> int:
    length_bytes = bytes(deserializer.read_bytes(length_of_length))
    if length_bytes[0] == 0:
        raise RLPDecodingError('length must not have leading zeros')
    length = int.from_bytes(length_bytes, byteorder='big')
    if length <= SHORT_PAYLOAD_MAX_LENGTH:
        raise RLPDecodingError('payload of up to 55 bytes must use a short header')
    return length
