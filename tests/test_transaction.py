import json
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from clutchlib.envelope import SignedEnvelope, verify_envelope
from clutchlib.exceptions import MalformedArguments, UnsupportedCallType
from clutchlib.function_calls import encode_function_call
from clutchlib.hashing import hash_transaction
from clutchlib.signer import Signer, verify_digest
from clutchlib.transaction import SignedTransaction, UnsignedTransaction, sign_transaction, sign_transaction_dict
from tests.utils import FARE, FROM_ADDRESS, NONCE, PRIVATE_KEY, make_api_payload, make_ride_request, make_unsigned_tx

# reference transaction signed with PRIVATE_KEY, recorded once
REFERENCE_RAW_TRANSACTION = (
    '0xf8dca86465623463666236336462313334363938653138373965613234393034646630373437323663633002a0398b3d8cbd'
    '56ca0ae7016947feae3ab5c98207c342ff1b79808cdc571bba65f4a01a46ca6c9e49ba6867463a3cce5d01b07e8f3621887ad64101'
    '531844407625a91cb84064313636656465386563653664383564316566353239633835393436333630326465633064333039613830'
    '626630346336303836366231323832333734343764aceb01e9d288403b300b626d50c988404c2529f6b47e10d288403b35ac4197d8'
    '1888404c2b187e7693508203e8'
)
REFERENCE_R = '0x398b3d8cbd56ca0ae7016947feae3ab5c98207c342ff1b79808cdc571bba65f4'
REFERENCE_S = '0x1a46ca6c9e49ba6867463a3cce5d01b07e8f3621887ad64101531844407625a9'
REFERENCE_V = 28
REFERENCE_HASH = 'd166ede8ece6d85d1ef529c859463602dec0d309a80bf04c60866b128237447d'
REFERENCE_CALL_BYTES = 'eb01e9d288403b300b626d50c988404c2529f6b47e10d288403b35ac4197d81888404c2b187e7693508203e8'


class UnsignedTransactionTestCase(unittest.TestCase):
    def test_address_is_normalized(self) -> None:
        tx = make_unsigned_tx()
        self.assertEqual(tx.from_address, FROM_ADDRESS)
        self.assertEqual(tx.get_call_bytes(), encode_function_call(make_ride_request()))

    def test_parse_rejects(self) -> None:
        good = {'from_address': FROM_ADDRESS, 'nonce': NONCE, 'call': make_ride_request()}
        bad = [
            {**good, 'from_address': FROM_ADDRESS[:-1]},
            {**good, 'from_address': None},
            {**good, 'nonce': -1},
            {**good, 'nonce': True},
            {**good, 'nonce': '2'},
            {**good, 'nonce': None},
            {**good, 'extra': 1},
        ]
        for data in bad:
            with self.assertRaises(MalformedArguments, msg=repr(data)):
                UnsignedTransaction.parse(data)

    def test_frozen(self) -> None:
        tx = make_unsigned_tx()
        with self.assertRaises(ValidationError):
            tx.nonce = 3  # type: ignore[misc]


class SignTransactionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.signer = Signer(PRIVATE_KEY)
        self.signed = sign_transaction(make_unsigned_tx(), PRIVATE_KEY)

    def test_reference_transaction(self) -> None:
        raw = self.signed.raw_transaction
        self.assertEqual(raw, REFERENCE_RAW_TRANSACTION)
        self.assertEqual(self.signed.r, REFERENCE_R)
        self.assertEqual(self.signed.s, REFERENCE_S)
        self.assertEqual(self.signed.v, REFERENCE_V)
        self.assertTrue(raw.startswith('0xf8dc'))
        self.assertEqual(len(raw), 2 + 2 * 222)
        self.assertEqual(raw, raw.lower())

        envelope = SignedEnvelope.decode(raw)
        self.assertEqual(envelope.from_address, FROM_ADDRESS)
        self.assertEqual(envelope.nonce, NONCE)
        self.assertEqual(envelope.get_call(), make_ride_request())
        self.assertEqual(envelope.hash, hash_transaction(FROM_ADDRESS, NONCE,
                                                         encode_function_call(make_ride_request())).hex)
        self.assertEqual(verify_envelope(envelope), self.signer.public_key_bytes())

    def test_reference_hash_and_call_bytes(self) -> None:
        call_bytes = encode_function_call(make_ride_request())
        self.assertEqual(call_bytes.hex(), REFERENCE_CALL_BYTES)
        self.assertEqual(hash_transaction(FROM_ADDRESS, NONCE, call_bytes).hex, REFERENCE_HASH)

        envelope = SignedEnvelope.decode(REFERENCE_RAW_TRANSACTION)
        self.assertEqual(envelope.hash, REFERENCE_HASH)
        self.assertEqual(envelope.call_bytes.hex(), REFERENCE_CALL_BYTES)
        self.assertEqual(verify_envelope(envelope), self.signer.public_key_bytes())

    def test_reference_transaction_is_reproducible(self) -> None:
        again = sign_transaction(make_unsigned_tx(), bytes.fromhex(PRIVATE_KEY))
        self.assertEqual(again, self.signed)
        self.assertEqual(sign_transaction(make_unsigned_tx(), self.signer), self.signed)
        self.assertEqual(sign_transaction(make_unsigned_tx(), '0x' + PRIVATE_KEY), self.signed)

    def test_signature_fields(self) -> None:
        envelope = SignedEnvelope.decode(self.signed.raw_transaction)
        for value in [self.signed.r, self.signed.s]:
            self.assertTrue(value.startswith('0x'))
            self.assertEqual(len(value), 66)
        self.assertEqual(int(self.signed.r, 16), envelope.r)
        self.assertEqual(int(self.signed.s, 16), envelope.s)
        self.assertEqual(self.signed.v, envelope.v)
        self.assertIn(self.signed.v, (27, 28))

    def test_json_output(self) -> None:
        data = self.signed.to_json_dict()
        self.assertEqual(set(data), {'r', 's', 'v', 'rawTransaction'})
        self.assertEqual(data['rawTransaction'], self.signed.raw_transaction)
        self.assertEqual(json.loads(json.dumps(data)), data)
        self.assertEqual(self.signed.payload.hex(), self.signed.raw_transaction[2:])

    def test_from_envelope(self) -> None:
        envelope = SignedEnvelope.decode(self.signed.raw_transaction)
        self.assertEqual(SignedTransaction.from_envelope(envelope), self.signed)

    def test_tampered_fare(self) -> None:
        original = hash_transaction(FROM_ADDRESS, NONCE, encode_function_call(make_ride_request()))
        # flip the lowest bit of the fare
        tampered = hash_transaction(FROM_ADDRESS, NONCE, encode_function_call(make_ride_request(fare=FARE ^ 1)))
        self.assertNotEqual(original.digest, tampered.digest)

        signature = SignedEnvelope.decode(self.signed.raw_transaction).signature
        public_key = self.signer.public_key_bytes()
        self.assertTrue(verify_digest(original.digest, signature, public_key))
        self.assertFalse(verify_digest(tampered.digest, signature, public_key))

    def test_different_keys(self) -> None:
        other = sign_transaction(make_unsigned_tx(), (1).to_bytes(32, 'big'))
        self.assertNotEqual(other.raw_transaction, self.signed.raw_transaction)
        self.assertNotEqual(verify_envelope(SignedEnvelope.decode(other.raw_transaction)),
                            self.signer.public_key_bytes())


class SignTransactionDictTestCase(unittest.TestCase):
    def test_same_as_typed(self) -> None:
        signed = sign_transaction_dict(make_api_payload(), PRIVATE_KEY)
        self.assertEqual(signed, sign_transaction(make_unsigned_tx(), PRIVATE_KEY))
        self.assertEqual(sign_transaction_dict(json.dumps(make_api_payload()), PRIVATE_KEY), signed)

    def test_unknown_call_is_rejected_before_encoding(self) -> None:
        payload = make_api_payload(data={'function_call_type': 'Unknown', 'arguments': {}})
        with patch('clutchlib.function_calls.base.rlp_encode') as call_encoder, \
                patch('clutchlib.hashing.rlp_encode') as payload_encoder, \
                patch('clutchlib.envelope.rlp_encode') as envelope_encoder:
            with self.assertRaises(UnsupportedCallType):
                sign_transaction_dict(payload, PRIVATE_KEY)
        call_encoder.assert_not_called()
        payload_encoder.assert_not_called()
        envelope_encoder.assert_not_called()

    def test_malformed_arguments(self) -> None:
        payload = make_api_payload()
        del payload['data']['arguments']['fare']
        with self.assertRaises(MalformedArguments):
            sign_transaction_dict(payload, PRIVATE_KEY)
