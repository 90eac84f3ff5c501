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

from typing import Union

from pydantic import Field
from structlog import get_logger

from clutchlib.exceptions import InvalidSignature, MalformedArguments, MalformedEnvelope
from clutchlib.function_calls import FunctionCall, decode_function_call
from clutchlib.hashing import TransactionHash, get_address_bytes, hash_transaction, normalize_address
from clutchlib.serialization import SerializationError
from clutchlib.serialization.encoding.rlp import RLPEncodable, decode_uint, rlp_decode, rlp_encode
from clutchlib.signer import SCALAR_SIZE, V_OFFSET, Signature, recover_public_key, verify_digest
from clutchlib.utils import HEX_PREFIX, bytes_to_int, parse_hex_str
from clutchlib.utils.pydantic import BaseModel

logger = get_logger()

ENVELOPE_FIELDS = ('from', 'nonce', 'r', 's', 'v', 'hash', 'call')

_HASH_HEX_LENGTH = 64
_LOWER_HEX_DIGITS = frozenset('0123456789abcdef')


class SignedEnvelope(BaseModel):
    """The transaction as it is sent to the ledger.

    It is encoded as the RLP list `[from, nonce, r, s, v, hash, call_bytes]`:

    - `from`: ASCII of the 40 hex digits of the sender address;
    - `nonce`: unsigned integer;
    - `r`, `s`: 32 bytes each, big-endian;
    - `v`: recovery id plus 27;
    - `hash`: ASCII of the 64 lowercase hex digits of the signed digest;
    - `call_bytes`: the encoded function call, embedded as a byte string.
    """

    from_address: str
    nonce: int = Field(ge=0)
    r: int
    s: int
    v: int
    hash: str
    call_bytes: bytes

    @property
    def signature(self) -> Signature:
        return Signature.from_v(self.r, self.s, self.v)

    def get_rlp_item(self) -> list[RLPEncodable]:
        signature = self.signature
        return [
            get_address_bytes(self.from_address),
            self.nonce,
            signature.r_bytes,
            signature.s_bytes,
            self.v,
            self.hash.encode('ascii'),
            self.call_bytes,
        ]

    def encode(self) -> bytes:
        return rlp_encode(self.get_rlp_item())

    @property
    def raw_transaction(self) -> str:
        """Encoded envelope as `0x` prefixed hex."""
        return HEX_PREFIX + self.encode().hex()

    def get_call(self) -> FunctionCall:
        return decode_function_call(self.call_bytes)

    @classmethod
    def decode(cls, raw: Union[bytes, bytearray, str]) -> 'SignedEnvelope':
        """Parse an encoded envelope, given as bytes or hex (with or without `0x`)."""
        try:
            data = parse_hex_str(raw) if isinstance(raw, str) else bytes(raw)
            item = rlp_decode(data)
        except (SerializationError, ValueError) as e:
            raise MalformedEnvelope(f'invalid encoding: {e}') from e

        if not isinstance(item, list) or len(item) != len(ENVELOPE_FIELDS):
            raise MalformedEnvelope(f'envelope must be a list of {len(ENVELOPE_FIELDS)} items')
        for name, value in zip(ENVELOPE_FIELDS, item):
            if not isinstance(value, bytes):
                raise MalformedEnvelope(f'{name} must be a byte string, got a list')

        from_bytes, nonce_bytes, r_bytes, s_bytes, v_bytes, hash_bytes, call_bytes = item

        try:
            from_address = normalize_address(from_bytes.decode('ascii'))
            nonce = decode_uint(nonce_bytes)
            v = decode_uint(v_bytes)
        except (UnicodeDecodeError, MalformedArguments, SerializationError) as e:
            raise MalformedEnvelope(str(e)) from e

        if len(r_bytes) != SCALAR_SIZE or len(s_bytes) != SCALAR_SIZE:
            raise MalformedEnvelope(f'r and s must have {SCALAR_SIZE} bytes each')
        if v not in (V_OFFSET, V_OFFSET + 1):
            raise MalformedEnvelope(f'v must be {V_OFFSET} or {V_OFFSET + 1}, got {v}')
        if len(hash_bytes) != _HASH_HEX_LENGTH or not set(hash_bytes.decode('latin-1')) <= _LOWER_HEX_DIGITS:
            raise MalformedEnvelope(f'hash must be {_HASH_HEX_LENGTH} lowercase hex digits')

        return cls(
            from_address=from_address,
            nonce=nonce,
            r=bytes_to_int(r_bytes),
            s=bytes_to_int(s_bytes),
            v=v,
            hash=hash_bytes.decode('ascii'),
            call_bytes=call_bytes,
        )


def assemble_envelope(from_address: str, nonce: int, signature: Signature, tx_hash: TransactionHash,
                      call_bytes: bytes) -> SignedEnvelope:
    return SignedEnvelope(
        from_address=normalize_address(from_address),
        nonce=nonce,
        r=signature.r,
        s=signature.s,
        v=signature.v,
        hash=tx_hash.hex,
        call_bytes=call_bytes,
    )


def verify_envelope(envelope: SignedEnvelope) -> bytes:
    """Check the envelope is consistent and return the compressed public key of whoever signed it.

    The hash is recomputed from `from`, `nonce` and `call_bytes` and must equal the embedded one; then the signer is
    recovered from the signature. Raises InvalidSignature otherwise.
    """
    tx_hash = hash_transaction(envelope.from_address, envelope.nonce, envelope.call_bytes)
    if tx_hash.hex != envelope.hash:
        logger.debug('hash mismatch', expected=tx_hash.hex, embedded=envelope.hash)
        raise InvalidSignature('embedded hash does not match the transaction')

    signature = envelope.signature
    public_key = recover_public_key(tx_hash.digest, signature)
    if not verify_digest(tx_hash.digest, signature, public_key):
        raise InvalidSignature('signature does not verify against the recovered key')
    return public_key
