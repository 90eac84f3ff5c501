import json
import unittest

from clutchlib.exceptions import MalformedArguments, UnsupportedCallType
from clutchlib.function_calls import Coordinates, RideRequest
from clutchlib.normalize import normalize_coordinates, parse_function_call, parse_unsigned_transaction
from tests.utils import DROPOFF, FROM_ADDRESS, NONCE, PICKUP, make_api_payload, make_unsigned_tx


class NormalizeCoordinatesTestCase(unittest.TestCase):
    def test_aliases(self) -> None:
        expected = {'latitude': 1.5, 'longitude': -2.5}
        self.assertEqual(normalize_coordinates({'latitude': 1.5, 'longitude': -2.5}), expected)
        self.assertEqual(normalize_coordinates({'lat': 1.5, 'lng': -2.5}), expected)
        self.assertEqual(normalize_coordinates({'lat': 1.5, 'longitude': -2.5}), expected)

    def test_canonical_name_wins(self) -> None:
        self.assertEqual(normalize_coordinates({'latitude': 1.0, 'lat': 9.0, 'lng': 2.0}),
                         {'latitude': 1.0, 'longitude': 2.0})

    def test_zero_is_not_missing(self) -> None:
        self.assertEqual(normalize_coordinates({'lat': 0.0, 'lng': 0}), {'latitude': 0.0, 'longitude': 0})

    def test_missing(self) -> None:
        for value in [{}, {'lat': 1.0}, {'longitude': 1.0}, {'lat': None, 'lng': 1.0}, [1.0, 2.0], None]:
            with self.assertRaises(MalformedArguments, msg=repr(value)):
                normalize_coordinates(value)


class ParseFunctionCallTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.expected = RideRequest(
            pickup=Coordinates(latitude=1.0, longitude=2.0),
            dropoff=Coordinates(latitude=3.0, longitude=4.0),
            fare=7,
        )

    def test_canonical(self) -> None:
        call = parse_function_call({
            'function_call_type': 'RideRequest',
            'arguments': {
                'pickup_location': {'latitude': 1.0, 'longitude': 2.0},
                'dropoff_location': {'latitude': 3.0, 'longitude': 4.0},
                'fare': 7,
            },
        })
        self.assertEqual(call, self.expected)

    def test_type_alias_and_flat_arguments(self) -> None:
        call = parse_function_call({
            'type': 'RideRequest',
            'pickup': {'lat': 1.0, 'lng': 2.0},
            'dropoff': {'lat': 3.0, 'lng': 4.0},
            'fare': 7,
        })
        self.assertEqual(call, self.expected)

    def test_unsupported_type(self) -> None:
        for data in [{'function_call_type': 'Unknown'}, {'type': 'Unknown', 'fare': 1}, {'arguments': {}}]:
            with self.assertRaises(UnsupportedCallType, msg=repr(data)):
                parse_function_call(data)

    def test_type_is_checked_first(self) -> None:
        # arguments are garbage, but the type error is what is reported
        with self.assertRaises(UnsupportedCallType):
            parse_function_call({'function_call_type': 'Unknown', 'arguments': 'garbage'})

    def test_malformed(self) -> None:
        bad = [
            'RideRequest',
            {'function_call_type': 'RideRequest', 'arguments': [1, 2]},
            {'function_call_type': 'RideRequest', 'arguments': {'pickup_location': {'lat': 1, 'lng': 2}}},
            {'function_call_type': 'RideRequest', 'arguments': {
                'pickup_location': {'lat': 1, 'lng': 2}, 'dropoff_location': {'lat': 1, 'lng': 2}, 'fare': -1}},
            {'function_call_type': 'RideRequest', 'arguments': {
                'pickup_location': {'lat': 1, 'lng': 2}, 'dropoff_location': 'here', 'fare': 1}},
        ]
        for data in bad:
            with self.assertRaises(MalformedArguments, msg=repr(data)):
                parse_function_call(data)


class ParseUnsignedTransactionTestCase(unittest.TestCase):
    def test_api_payload(self) -> None:
        tx = parse_unsigned_transaction(make_api_payload())
        self.assertEqual(tx, make_unsigned_tx())
        self.assertEqual(tx.from_address, FROM_ADDRESS)
        self.assertEqual(tx.nonce, NONCE)
        self.assertEqual((tx.call.pickup.latitude, tx.call.pickup.longitude), PICKUP)
        self.assertEqual((tx.call.dropoff.latitude, tx.call.dropoff.longitude), DROPOFF)

    def test_json_document(self) -> None:
        document = json.dumps(make_api_payload())
        self.assertEqual(parse_unsigned_transaction(document), make_unsigned_tx())
        self.assertEqual(parse_unsigned_transaction(document.encode('utf-8')), make_unsigned_tx())

    def test_call_key_and_aliases(self) -> None:
        payload = make_api_payload()
        data = payload.pop('data')
        payload['call'] = {
            'type': 'RideRequest',
            'pickup_location': {'lat': PICKUP[0], 'lng': PICKUP[1]},
            'dropoff_location': {'lat': DROPOFF[0], 'lng': DROPOFF[1]},
            'fare': data['arguments']['fare'],
        }
        payload['from'] = FROM_ADDRESS
        self.assertEqual(parse_unsigned_transaction(payload), make_unsigned_tx())

    def test_aliases_sign_the_same(self) -> None:
        canonical = parse_unsigned_transaction(make_api_payload())
        aliased = parse_unsigned_transaction(make_api_payload(data={
            'type': 'RideRequest',
            'pickup': {'lat': PICKUP[0], 'lng': PICKUP[1]},
            'dropoff': {'lat': DROPOFF[0], 'lng': DROPOFF[1]},
            'fare': 1000,
        }))
        self.assertEqual(canonical.get_call_bytes(), aliased.get_call_bytes())

    def test_rejects(self) -> None:
        bad = [
            '{not json',
            '[]',
            make_api_payload(data=None),
            make_api_payload(**{'from': 'deb4'}),
            make_api_payload(nonce=-1),
            make_api_payload(nonce=None),
        ]
        for raw in bad:
            with self.assertRaises(MalformedArguments, msg=repr(raw)):
                parse_unsigned_transaction(raw)

    def test_missing_from(self) -> None:
        payload = make_api_payload()
        del payload['from']
        with self.assertRaises(MalformedArguments):
            parse_unsigned_transaction(payload)
