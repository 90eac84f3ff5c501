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

from typing import NamedTuple, Union

from coincurve import PrivateKey, PublicKey
from cryptography.exceptions import InvalidSignature as CryptographyInvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, encode_dss_signature
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from structlog import get_logger

from clutchlib.exceptions import InvalidKeyOrDigest, InvalidSignature
from clutchlib.hashing import DIGEST_SIZE, keccak_256
from clutchlib.utils import bytes_to_int, int_to_bytes, is_hex, strip_hex_prefix

logger = get_logger()

# order of the secp256k1 group, valid private keys are in [1, n-1]
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

PRIVATE_KEY_SIZE = 32
SCALAR_SIZE = 32

# v = recovery_id + V_OFFSET
V_OFFSET = 27


class Signature(NamedTuple):
    r: int
    s: int
    recovery_id: int

    @property
    def r_bytes(self) -> bytes:
        return int_to_bytes(self.r, SCALAR_SIZE)

    @property
    def s_bytes(self) -> bytes:
        return int_to_bytes(self.s, SCALAR_SIZE)

    @property
    def v(self) -> int:
        return self.recovery_id + V_OFFSET

    @classmethod
    def from_v(cls, r: int, s: int, v: int) -> 'Signature':
        recovery_id = v - V_OFFSET
        if recovery_id not in (0, 1):
            raise InvalidSignature(f'v must be {V_OFFSET} or {V_OFFSET + 1}, got {v}')
        return cls(r=r, s=s, recovery_id=recovery_id)

    def to_recoverable_bytes(self) -> bytes:
        """65 bytes: r, s and the recovery id, the layout libsecp256k1 uses."""
        return self.r_bytes + self.s_bytes + bytes([self.recovery_id])


def parse_private_key(private_key: Union[bytes, str]) -> bytes:
    """Turn a private key given as 32 raw bytes or as hex (with or without `0x`) into 32 raw bytes.

    Raises InvalidKeyOrDigest if the key isn't a scalar in [1, n-1].
    """
    if isinstance(private_key, str):
        hex_key = strip_hex_prefix(private_key.strip())
        if len(hex_key) != 2 * PRIVATE_KEY_SIZE or not is_hex(hex_key):
            raise InvalidKeyOrDigest(f'private key must have {2 * PRIVATE_KEY_SIZE} hex digits')
        key_bytes = bytes.fromhex(hex_key)
    elif isinstance(private_key, (bytes, bytearray)):
        key_bytes = bytes(private_key)
    else:
        raise InvalidKeyOrDigest(f'private key must be bytes or hex str, got {type(private_key).__name__}')

    if len(key_bytes) != PRIVATE_KEY_SIZE:
        raise InvalidKeyOrDigest(f'private key must have {PRIVATE_KEY_SIZE} bytes, got {len(key_bytes)}')
    if not 1 <= bytes_to_int(key_bytes) < SECP256K1_ORDER:
        raise InvalidKeyOrDigest('private key is out of the secp256k1 range')
    return key_bytes


def _check_digest(digest: bytes) -> bytes:
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != DIGEST_SIZE:
        raise InvalidKeyOrDigest(f'digest must have exactly {DIGEST_SIZE} bytes')
    return bytes(digest)


def get_address_from_public_key(public_key: bytes) -> str:
    """Ethereum style address of a public key: last 20 bytes of the keccak of the uncompressed point, in hex.

    >>> get_address_from_public_key(bytes.fromhex(
    ...     '0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798'))
    '7e5f4552091a69125d5dfcb7b8c2659029395bdf'
    """
    point = PublicKey(public_key).format(compressed=False)
    return keccak_256(point[1:])[-20:].hex()


class Signer:
    """Signs digests with a secp256k1 private key.

    Signatures are deterministic (RFC 6979 nonces) and have a low `s`, so signing the same digest twice gives the
    same bytes. The key itself is never logged nor included in the repr.
    """

    def __init__(self, private_key: Union[bytes, str]) -> None:
        self.log = logger.new()
        secret = parse_private_key(private_key)
        self._private_key = PrivateKey(secret)
        self._ec_private_key = ec.derive_private_key(bytes_to_int(secret), ec.SECP256K1())

    def __repr__(self) -> str:
        return f'Signer(address={self.address!r})'

    def get_public_key(self) -> ec.EllipticCurvePublicKey:
        return self._ec_private_key.public_key()

    def public_key_bytes(self, compressed: bool = True) -> bytes:
        public_format = PublicFormat.CompressedPoint if compressed else PublicFormat.UncompressedPoint
        return self.get_public_key().public_bytes(Encoding.X962, public_format)

    @property
    def address(self) -> str:
        return get_address_from_public_key(self.public_key_bytes())

    def sign_digest(self, digest: bytes) -> Signature:
        digest = _check_digest(digest)
        # hasher=None: the digest is signed as is
        raw = self._private_key.sign_recoverable(digest, hasher=None)
        signature = Signature(
            r=bytes_to_int(raw[:SCALAR_SIZE]),
            s=bytes_to_int(raw[SCALAR_SIZE:2 * SCALAR_SIZE]),
            recovery_id=raw[2 * SCALAR_SIZE],
        )
        self.log.debug('digest signed', digest=digest.hex(), v=signature.v)
        return signature


def recover_public_key(digest: bytes, signature: Signature, compressed: bool = True) -> bytes:
    """Recover the public key that produced `signature` over `digest`."""
    digest = _check_digest(digest)
    if not (0 < signature.r < SECP256K1_ORDER and 0 < signature.s < SECP256K1_ORDER):
        raise InvalidSignature('r and s must be in [1, n-1]')
    try:
        public_key = PublicKey.from_signature_and_message(signature.to_recoverable_bytes(), digest, hasher=None)
    except ValueError as e:
        raise InvalidSignature(f'cannot recover public key: {e}') from e
    return public_key.format(compressed=compressed)


def verify_digest(digest: bytes, signature: Signature, public_key: bytes) -> bool:
    """Check an ECDSA signature over `digest` against a public key in SEC1 (compressed or not) format."""
    digest = _check_digest(digest)
    try:
        ec_public_key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), public_key)
    except ValueError as e:
        raise InvalidSignature(f'invalid public key: {e}') from e
    der = encode_dss_signature(signature.r, signature.s)
    try:
        ec_public_key.verify(der, digest, ec.ECDSA(Prehashed(hashes.SHA256())))
    except CryptographyInvalidSignature:
        return False
    return True
