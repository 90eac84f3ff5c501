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

"""Turn payloads as the API sends them into canonical transactions.

The API is loose about some names: coordinates come as `{latitude, longitude}` or `{lat, lng}`, the call type as
`function_call_type` or `type`, and call arguments either under `arguments` or next to the type. All of that is
resolved here, so the rest of the library only sees one shape.

>>> tx = parse_unsigned_transaction({
...     'from': '0xdeb4cfb63db134698e1879ea24904df074726cc0',
...     'nonce': 2,
...     'data': {
...         'function_call_type': 'RideRequest',
...         'arguments': {
...             'pickup_location': {'lat': 1.0, 'lng': 2.0},
...             'dropoff_location': {'latitude': -1.0, 'longitude': 0.0},
...             'fare': 1000,
...         },
...     },
... })
>>> tx.from_address, tx.nonce, tx.call.fare
('deb4cfb63db134698e1879ea24904df074726cc0', 2, 1000)
>>> tx.call.pickup
Coordinates(latitude=1.0, longitude=2.0)
"""

import json
from collections.abc import Callable, Mapping
from typing import Any, Union

from clutchlib.exceptions import MalformedArguments, UnsupportedCallType
from clutchlib.function_calls import FunctionCall, FunctionCallTag, get_function_call_cls
from clutchlib.transaction import UnsignedTransaction
from clutchlib.utils.dict import get_first_of

LATITUDE_KEYS = ('latitude', 'lat')
LONGITUDE_KEYS = ('longitude', 'lng')


def normalize_coordinates(value: Any) -> dict[str, Any]:
    """Return `{latitude, longitude}` out of either alias set. Values are not checked here."""
    if not isinstance(value, Mapping):
        raise MalformedArguments(f'coordinates must be an object, got {type(value).__name__}')
    latitude = get_first_of(value, *LATITUDE_KEYS)
    longitude = get_first_of(value, *LONGITUDE_KEYS)
    if latitude is None or longitude is None:
        raise MalformedArguments('coordinates need latitude/lat and longitude/lng')
    return {'latitude': latitude, 'longitude': longitude}


def _ride_request_args(args: Mapping[str, Any]) -> dict[str, Any]:
    pickup = get_first_of(args, 'pickup_location', 'pickup')
    dropoff = get_first_of(args, 'dropoff_location', 'dropoff')
    fare = args.get('fare')
    if pickup is None or dropoff is None or fare is None:
        raise MalformedArguments('RideRequest needs pickup_location, dropoff_location and fare')
    return {
        'pickup': normalize_coordinates(pickup),
        'dropoff': normalize_coordinates(dropoff),
        'fare': fare,
    }


_ARGUMENT_NORMALIZERS: dict[FunctionCallTag, Callable[[Mapping[str, Any]], dict[str, Any]]] = {
    FunctionCallTag.RIDE_REQUEST: _ride_request_args,
}


def parse_function_call(data: Any) -> FunctionCall:
    """Build a FunctionCall out of the `data` object of an unsigned transaction.

    The type is resolved before anything else, so an unsupported type fails without looking at the arguments.
    """
    if not isinstance(data, Mapping):
        raise MalformedArguments(f'function call must be an object, got {type(data).__name__}')

    call_type = get_first_of(data, 'function_call_type', 'type')
    if call_type is None:
        raise UnsupportedCallType('function call has no type')
    cls = get_function_call_cls(call_type)

    arguments = data.get('arguments')
    if arguments is None:
        arguments = data
    if not isinstance(arguments, Mapping):
        raise MalformedArguments(f'arguments must be an object, got {type(arguments).__name__}')

    return cls.parse(_ARGUMENT_NORMALIZERS[cls.tag](arguments))


def parse_unsigned_transaction(raw: Union[Mapping[str, Any], str, bytes]) -> UnsignedTransaction:
    """Parse `{from, nonce, data}` (`call` is accepted instead of `data`), as a mapping or a JSON document."""
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise MalformedArguments(f'unsigned transaction is not valid JSON: {e}') from e
    if not isinstance(raw, Mapping):
        raise MalformedArguments(f'unsigned transaction must be an object, got {type(raw).__name__}')

    call_data = get_first_of(raw, 'data', 'call')
    if call_data is None:
        raise MalformedArguments('unsigned transaction has no data')
    call = parse_function_call(call_data)

    return UnsignedTransaction.parse({
        'from_address': raw.get('from'),
        'nonce': raw.get('nonce'),
        'call': call,
    })
