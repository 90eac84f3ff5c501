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

import asyncio
import json
import sys
from argparse import ArgumentParser, ArgumentTypeError, Namespace
from typing import Any

from structlog import get_logger

logger = get_logger()


def coordinates(value: str) -> dict[str, float]:
    """Parse `LAT,LNG` into a coordinates mapping."""
    try:
        latitude, longitude = (float(part) for part in value.split(','))
    except ValueError:
        raise ArgumentTypeError(f'expected LAT,LNG, got {value!r}')
    return {'latitude': latitude, 'longitude': longitude}


def create_parser() -> ArgumentParser:
    from clutchlib_cli.util import create_parser
    parser = create_parser()
    parser.add_argument('--api-url', help='Base url of the API, overrides the one in the settings file')
    parser.add_argument('--private-key', help='Hex encoded secp256k1 private key, with or without 0x')
    parser.add_argument('--public-key', help='Identity used to get an auth token, defaults to the signer address')
    parser.add_argument('--pickup', type=coordinates, required=True, help='Pickup location as LAT,LNG')
    parser.add_argument('--dropoff', type=coordinates, required=True, help='Dropoff location as LAT,LNG')
    parser.add_argument('--fare', type=int, required=True, help='Fare to pay for the ride')
    return parser


async def request_ride(args: Namespace) -> Any:
    from clutchlib.client import ClutchClient
    from clutchlib.signer import Signer

    signer = Signer(args.private_key)
    public_key = args.public_key or '0x' + signer.address
    async with ClutchClient(public_key, api_url=args.api_url) as client:
        return await client.request_ride(args.pickup, args.dropoff, args.fare, signer)


def execute(args: Namespace) -> int:
    from clutchlib.exceptions import ClutchError
    from clutchlib_cli.util import check_or_exit

    check_or_exit(bool(args.private_key), 'A private key is required: use --private-key or CLUTCH_PRIVATE_KEY')

    try:
        result = asyncio.run(request_ride(args))
    except ClutchError as e:
        logger.error('ride request failed', error=str(e))
        print(f'Ride request failed: {e}', file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
