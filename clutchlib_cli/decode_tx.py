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
from typing import Any


def create_parser() -> ArgumentParser:
    from clutchlib_cli.util import create_parser
    parser = create_parser()
    parser.add_argument('raw', nargs='?', default='-',
                        help='Raw transaction as hex (with or without 0x), "-" (default) reads from stdin')
    return parser


def envelope_to_json(envelope: Any) -> dict[str, Any]:
    from clutchlib.exceptions import TxEncodingError
    from clutchlib.utils import add_hex_prefix

    signature = envelope.signature
    data: dict[str, Any] = {
        'from': add_hex_prefix(envelope.from_address),
        'nonce': envelope.nonce,
        'r': add_hex_prefix(signature.r_bytes.hex()),
        's': add_hex_prefix(signature.s_bytes.hex()),
        'v': envelope.v,
        'hash': envelope.hash,
        'call_bytes': envelope.call_bytes.hex(),
    }
    try:
        call = envelope.get_call()
    except TxEncodingError as e:
        data['call'] = {'error': str(e)}
    else:
        data['call'] = {
            'function_call_type': call.wire_name,
            'arguments': call.model_dump(),
        }
    return data


def execute(args: Namespace) -> int:
    from clutchlib.envelope import SignedEnvelope
    from clutchlib.exceptions import MalformedEnvelope
    from clutchlib_cli.util import read_input

    raw = args.raw if args.raw != '-' else read_input(None)
    try:
        envelope = SignedEnvelope.decode(raw.strip())
    except MalformedEnvelope as e:
        print(f'Cannot decode transaction: {e}', file=sys.stderr)
        return 1

    print(json.dumps(envelope_to_json(envelope), indent=2))
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
