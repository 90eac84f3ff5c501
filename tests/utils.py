from typing import Any, Optional
from unittest.mock import MagicMock

from clutchlib.function_calls import Coordinates, RideRequest
from clutchlib.transaction import UnsignedTransaction

# fixed inputs of the reference transaction
FROM_ADDRESS = 'deb4cfb63db134698e1879ea24904df074726cc0'
NONCE = 2
PICKUP = (27.18767371338689, 56.29034313023669)
DROPOFF = (27.209659671374624, 56.336684997461475)
FARE = 1000
PRIVATE_KEY = 'd2c446110cfcecbdf05b2be528e72483de5b6f7ef9c7856df2f81f48e9f2748f'


class AsyncMock(MagicMock):
    async def __call__(self, *args, **kwargs):
        return super(AsyncMock, self).__call__(*args, **kwargs)


class MockResponse:
    """Stands for an aiohttp ClientResponse."""

    def __init__(self, json_data: Any = None, status: int = 200, text: Optional[str] = None) -> None:
        self.status = status
        self._json = json_data
        self._text = text if text is not None else ''

    async def json(self) -> Any:
        return self._json

    async def text(self) -> str:
        return self._text


def make_ride_request(fare: int = FARE) -> RideRequest:
    return RideRequest(
        pickup=Coordinates(latitude=PICKUP[0], longitude=PICKUP[1]),
        dropoff=Coordinates(latitude=DROPOFF[0], longitude=DROPOFF[1]),
        fare=fare,
    )


def make_unsigned_tx(fare: int = FARE, nonce: int = NONCE) -> UnsignedTransaction:
    return UnsignedTransaction(from_address='0x' + FROM_ADDRESS, nonce=nonce, call=make_ride_request(fare))


def make_api_payload(**overrides: Any) -> dict[str, Any]:
    """Unsigned transaction as the API returns it."""
    payload: dict[str, Any] = {
        'from': '0x' + FROM_ADDRESS,
        'nonce': NONCE,
        'data': {
            'function_call_type': 'RideRequest',
            'arguments': {
                'pickup_location': {'latitude': PICKUP[0], 'longitude': PICKUP[1]},
                'dropoff_location': {'latitude': DROPOFF[0], 'longitude': DROPOFF[1]},
                'fare': FARE,
            },
        },
    }
    payload.update(overrides)
    return payload
