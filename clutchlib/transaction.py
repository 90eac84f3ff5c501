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

from collections.abc import Mapping
from typing import Annotated, Any, Union

from pydantic import BeforeValidator, Field, ValidationError
from structlog import get_logger

from clutchlib.envelope import SignedEnvelope, assemble_envelope
from clutchlib.exceptions import MalformedArguments
from clutchlib.function_calls import FunctionCall, encode_function_call
from clutchlib.hashing import hash_transaction, normalize_address
from clutchlib.signer import Signer
from clutchlib.utils import HEX_PREFIX
from clutchlib.utils.pydantic import BaseModel, format_validation_error

logger = get_logger()


def _validate_address(value: Any) -> str:
    try:
        return normalize_address(value)
    except MalformedArguments as e:
        raise ValueError(str(e)) from e


Address = Annotated[str, BeforeValidator(_validate_address)]
Nonce = Annotated[int, Field(strict=True, ge=0)]


class UnsignedTransaction(BaseModel):
    """A transaction waiting to be signed.

    `from_address` is kept without the `0x` prefix. Use `clutchlib.normalize` to build one out of an API payload.
    """

    from_address: Address
    nonce: Nonce
    call: FunctionCall

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> 'UnsignedTransaction':
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedArguments(f'invalid transaction: {format_validation_error(e)}') from e

    def get_call_bytes(self) -> bytes:
        return encode_function_call(self.call)


class SignedTransaction(BaseModel):
    """Result of signing: signature parts as `0x` hex and the encoded envelope."""

    r: str
    s: str
    v: int
    raw_transaction: str

    @classmethod
    def from_envelope(cls, envelope: SignedEnvelope) -> 'SignedTransaction':
        signature = envelope.signature
        return cls(
            r=HEX_PREFIX + signature.r_bytes.hex(),
            s=HEX_PREFIX + signature.s_bytes.hex(),
            v=signature.v,
            raw_transaction=envelope.raw_transaction,
        )

    @property
    def payload(self) -> bytes:
        """The encoded envelope as raw bytes."""
        return bytes.fromhex(self.raw_transaction[len(HEX_PREFIX):])

    def to_json_dict(self) -> dict[str, Any]:
        return {
            'r': self.r,
            's': self.s,
            'v': self.v,
            'rawTransaction': self.raw_transaction,
        }


def sign_transaction(unsigned: UnsignedTransaction, private_key: Union[bytes, str, Signer]) -> SignedTransaction:
    """Encode, hash and sign `unsigned`, returning the envelope ready to be submitted.

    The same transaction and key always produce the same output.
    """
    signer = private_key if isinstance(private_key, Signer) else Signer(private_key)

    call_bytes = unsigned.get_call_bytes()
    tx_hash = hash_transaction(unsigned.from_address, unsigned.nonce, call_bytes)
    signature = signer.sign_digest(tx_hash.digest)
    envelope = assemble_envelope(unsigned.from_address, unsigned.nonce, signature, tx_hash, call_bytes)

    logger.debug('transaction signed', from_address=unsigned.from_address, nonce=unsigned.nonce,
                 call=unsigned.call.wire_name, hash=tx_hash.hex)
    return SignedTransaction.from_envelope(envelope)


def sign_transaction_dict(raw: Union[Mapping[str, Any], str],
                          private_key: Union[bytes, str, Signer]) -> SignedTransaction:
    """Same as `sign_transaction`, taking the unsigned transaction as returned by the API (dict or JSON)."""
    from clutchlib.normalize import parse_unsigned_transaction
    return sign_transaction(parse_unsigned_transaction(raw), private_key)
