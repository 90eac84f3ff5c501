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

import time
from collections.abc import Mapping
from typing import Any, Callable, NamedTuple, Optional

from aiohttp import ClientSession, ClientTimeout
from structlog import get_logger

from clutchlib.conf import ClutchSettings, get_global_settings
from clutchlib.exceptions import ClutchClientError, GraphQLError, SubmitTxFailed
from clutchlib.normalize import normalize_coordinates, parse_unsigned_transaction
from clutchlib.signer import Signer
from clutchlib.transaction import SignedTransaction, UnsignedTransaction, sign_transaction

logger = get_logger()

GENERATE_TOKEN_MUTATION = '''
mutation GenerateToken($publicKey: String!) {
  generateToken(publicKey: $publicKey) {
    token
    expiresAt
  }
}
'''

CREATE_UNSIGNED_RIDE_REQUEST_MUTATION = '''
mutation CreateUnsignedRideRequest($pickupLatitude: Float!, $pickupLongitude: Float!,
                                   $dropoffLatitude: Float!, $dropoffLongitude: Float!, $fare: Int!) {
  createUnsignedRideRequest(
    pickupLatitude: $pickupLatitude,
    pickupLongitude: $pickupLongitude,
    dropoffLatitude: $dropoffLatitude,
    dropoffLongitude: $dropoffLongitude,
    fare: $fare
  )
}
'''


class AuthToken(NamedTuple):
    """Bearer token given by `generateToken`."""

    token: str
    # unix timestamp, in seconds
    expires_at: float


class ClutchClient:
    """Used to communicate with the ClutchHub API.

    `public_key` identifies the user when asking for auth tokens. Tokens are cached and a new one is requested once
    the current one is within `TOKEN_REFRESH_MARGIN` seconds of expiring.
    """

    def __init__(self, public_key: str, *, settings: Optional[ClutchSettings] = None, api_url: Optional[str] = None,
                 clock: Callable[[], float] = time.time) -> None:
        self.log = logger.new()
        settings = settings or get_global_settings()
        if api_url is not None:
            # validate again so the trailing slash is stripped
            settings = ClutchSettings.model_validate({**settings.model_dump(), 'API_URL': api_url})
        self.settings = settings
        self._base_headers = {
            'User-Agent': self.settings.USER_AGENT,
        }
        self._public_key = public_key
        self._clock = clock
        self._token: Optional[AuthToken] = None
        self._session: Optional[ClientSession] = None

    async def start(self) -> None:
        """Start a session with the API."""
        timeout = ClientTimeout(total=self.settings.REQUEST_TIMEOUT)
        self._session = ClientSession(headers=self._base_headers, timeout=timeout)

    async def stop(self) -> None:
        """Stop the session with the API."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> 'ClutchClient':
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    def _has_valid_token(self) -> bool:
        if self._token is None:
            return False
        return self._clock() < self._token.expires_at - self.settings.TOKEN_REFRESH_MARGIN

    async def _post_graphql(self, query: str, variables: dict[str, Any],
                            headers: Optional[dict[str, str]] = None) -> dict[str, Any]:
        assert self._session is not None

        resp = await self._session.post(self.settings.graphql_url, json={'query': query, 'variables': variables},
                                        headers=headers or {})
        status = resp.status
        if status > 299:
            response = await resp.text()
            self.log.error('Error calling GraphQL API', response=response, status=status)
            raise ClutchClientError(f'GraphQL request failed (status {status})')

        body = await resp.json()
        errors = body.get('errors')
        if errors:
            messages = [e.get('message', str(e)) if isinstance(e, dict) else str(e) for e in errors]
            self.log.error('GraphQL errors', errors=messages)
            raise GraphQLError(messages)

        data = body.get('data')
        if not data:
            raise ClutchClientError('No data returned from the API.')
        return data

    async def generate_token(self) -> AuthToken:
        """Ask for a new auth token and cache it."""
        data = await self._post_graphql(GENERATE_TOKEN_MUTATION, {'publicKey': self._public_key})
        result = data.get('generateToken') or {}
        try:
            token = AuthToken(token=result['token'], expires_at=float(result['expiresAt']))
        except (KeyError, TypeError, ValueError) as e:
            raise ClutchClientError(f'Invalid generateToken response: {result!r}') from e
        self._token = token
        self.log.debug('auth token generated', expires_at=token.expires_at)
        return token

    async def get_token(self) -> str:
        """Return the cached token, asking for a new one if it is missing or about to expire."""
        if not self._has_valid_token():
            await self.generate_token()
        assert self._token is not None
        return self._token.token

    async def create_unsigned_ride_request(self, pickup: Mapping[str, Any], dropoff: Mapping[str, Any],
                                           fare: int) -> Any:
        """Ask the API for an unsigned ride request. Coordinates may use `latitude/longitude` or `lat/lng`."""
        pickup_coordinates = normalize_coordinates(pickup)
        dropoff_coordinates = normalize_coordinates(dropoff)
        variables = {
            'pickupLatitude': pickup_coordinates['latitude'],
            'pickupLongitude': pickup_coordinates['longitude'],
            'dropoffLatitude': dropoff_coordinates['latitude'],
            'dropoffLongitude': dropoff_coordinates['longitude'],
            'fare': fare,
        }
        token = await self.get_token()
        data = await self._post_graphql(CREATE_UNSIGNED_RIDE_REQUEST_MUTATION, variables,
                                        headers={'Authorization': f'Bearer {token}'})
        unsigned = data.get('createUnsignedRideRequest')
        if not unsigned:
            raise ClutchClientError('No data returned from createUnsignedRideRequest')
        return unsigned

    async def submit_transaction(self, unsigned: UnsignedTransaction, signed: SignedTransaction) -> Any:
        """Post a signed transaction to the API and return its JSON answer."""
        assert self._session is not None

        data = {
            'from': unsigned.from_address,
            'nonce': unsigned.nonce,
            'payload': signed.payload.hex(),
            'r': signed.r,
            's': signed.s,
            'v': signed.v,
        }
        resp = await self._session.post(self.settings.send_transaction_url, json=data)

        status = resp.status
        if status > 299:
            response = await resp.text()
            self.log.error('Error submitting transaction', response=response, status=status)
            raise SubmitTxFailed(f'Cannot submit transaction (status {status})', status=status)

        result = await resp.json()
        self.log.info('transaction submitted', from_address=unsigned.from_address, nonce=unsigned.nonce)
        return result

    async def request_ride(self, pickup: Mapping[str, Any], dropoff: Mapping[str, Any], fare: int,
                           signer: Signer) -> Any:
        """Fetch an unsigned ride request, sign it with `signer` and submit it."""
        raw = await self.create_unsigned_ride_request(pickup, dropoff, fare)
        unsigned = parse_unsigned_transaction(raw)
        signed = sign_transaction(unsigned, signer)
        return await self.submit_transaction(unsigned, signed)
