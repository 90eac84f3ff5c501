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

import json
import sys
from argparse import ArgumentParser, Namespace


def create_parser() -> ArgumentParser:
    from clutchlib_cli.util import create_parser
    parser = create_parser()
    parser.add_argument('raw', nargs='?', default='-',
                        help='Raw transaction as hex (with or without 0x), "-" (default) reads from stdin')
    return parser


def execute(args: Namespace) -> int:
    from clutchlib.envelope import SignedEnvelope, verify_envelope
    from clutchlib.exceptions import MalformedEnvelope, SigningError
    from clutchlib.signer import get_address_from_public_key
    from clutchlib_cli.util import read_input

    raw = args.raw if args.raw != '-' else read_input(None)
    try:
        envelope = SignedEnvelope.decode(raw.strip())
        public_key = verify_envelope(envelope)
    except (MalformedEnvelope, SigningError) as e:
        print(f'Invalid transaction: {e}', file=sys.stderr)
        return 1

    address = get_address_from_public_key(public_key)
    print(json.dumps({
        'public_key': public_key.hex(),
        'signer_address': '0x' + address,
        'from': '0x' + envelope.from_address,
        'signer_matches_from': address == envelope.from_address.lower(),
    }, indent=2))
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
