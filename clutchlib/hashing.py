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

r"""Keccak-256 hashing of unsigned transactions.

The signed digest is `keccak_256(rlp([from, nonce, call_bytes]))`, where `from` is the address in its prefix-free
hex form taken as ASCII bytes, `nonce` an unsigned integer and `call_bytes` the already encoded function call,
embedded as a byte string.

>>> keccak_256(b'').hex()
'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
>>> payload = get_signing_payload('0x' + '0' * 38 + 'aB', 0, b'\xc0')
>>> payload.hex() == 'eca8' + '30' * 38 + '6142' + '80' + '81c0'
True
"""

from typing import NamedTuple

from Crypto.Hash import keccak

from clutchlib.exceptions import MalformedArguments
from clutchlib.serialization.encoding.rlp import rlp_encode
from clutchlib.serialization.types import Buffer
from clutchlib.utils import is_hex, strip_hex_prefix

ADDRESS_HEX_LENGTH = 40

DIGEST_SIZE = 32


class TransactionHash(NamedTuple):
    digest: bytes
    hex: str


def keccak_256(data: Buffer) -> bytes:
    """Original Keccak-256, as used by Ethereum. It is not the same function as the standardized SHA3-256."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def normalize_address(address: str) -> str:
    """Strip the optional `0x` and check the address is 40 hex digits. Case is kept as given.

    >>> normalize_address('0xDEB4cfb63db134698e1879ea24904df074726cc0')
    'DEB4cfb63db134698e1879ea24904df074726cc0'
    """
    if not isinstance(address, str):
        raise MalformedArguments(f'address must be a string, got {type(address).__name__}')
    stripped = strip_hex_prefix(address)
    if len(stripped) != ADDRESS_HEX_LENGTH or not is_hex(stripped):
        raise MalformedArguments(f'address must have {ADDRESS_HEX_LENGTH} hex digits: {address!r}')
    return stripped


def get_address_bytes(address: str) -> bytes:
    """Bytes that stand for `address` inside the signed payload and the envelope."""
    return normalize_address(address).encode('ascii')


def get_signing_payload(from_address: str, nonce: int, call_bytes: bytes) -> bytes:
    return rlp_encode([get_address_bytes(from_address), nonce, call_bytes])


def hash_transaction(from_address: str, nonce: int, call_bytes: bytes) -> TransactionHash:
    """Compute the digest to be signed. Also returns its lowercase hex form, without prefix."""
    digest = keccak_256(get_signing_payload(from_address, nonce, call_bytes))
    return TransactionHash(digest=digest, hex=digest.hex())
