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

"""
This module implements the canonical encoding of IEEE-754 binary64 floats.

The float is not converted numerically, its bit pattern is reinterpreted as a big-endian unsigned 64-bit integer.
Every float64 (including NaN payloads, signed zeros and infinities) maps to exactly one integer and back.

>>> hex(float_to_bits(1.0))
'0x3ff0000000000000'
>>> hex(float_to_bits(-0.0))
'0x8000000000000000'
>>> hex(float_to_bits(float('-inf')))
'0xfff0000000000000'
>>> bits_to_float(0x4000000000000000)
2.0

>>> se = Serializer()
>>> encode_float64(se, 0.1)  # writes 3fb999999999999a
>>> encode_float64(se, -2.5)  # writes c004000000000000
>>> se.finalize().hex()
'3fb999999999999ac004000000000000'

>>> de = Deserializer(bytes.fromhex('3fb999999999999ac004000000000000'))
>>> decode_float64(de)
0.1
>>> decode_float64(de)
-2.5
>>> de.finalize()
"""

import struct

from clutchlib.serialization import Deserializer, Serializer

_FLOAT64 = struct.Struct('>d')
_UINT64 = struct.Struct('>Q')

MAX_BITS = (1 << 64) - 1


def float_to_bits(value: float) -> int:
    """Return the binary64 bit pattern of `value` as an unsigned integer (big-endian interpretation)."""
    (bits,) = _UINT64.unpack(_FLOAT64.pack(value))
    return bits


def bits_to_float(bits: int) -> float:
    """Inverse of `float_to_bits`."""
    if not 0 <= bits <= MAX_BITS:
        raise ValueError(f'bit pattern out of range for a float64: {bits}')
    (value,) = _FLOAT64.unpack(_UINT64.pack(bits))
    return value


def encode_float64(serializer: Serializer, value: float) -> None:
    """Write the 8 raw bytes of `value` in network byte order."""
    serializer.write_struct((value,), _FLOAT64.format)


def decode_float64(deserializer: Deserializer) -> float:
    (value,) = deserializer.read_struct(_FLOAT64.format)
    return value
