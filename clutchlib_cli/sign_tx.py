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
    parser.add_argument('input', nargs='?', default='-',
                        help='File with the unsigned transaction as JSON, "-" (default) reads from stdin')
    parser.add_argument('--private-key', help='Hex encoded secp256k1 private key, with or without 0x')
    return parser


def execute(args: Namespace) -> int:
    from clutchlib.exceptions import ClutchError
    from clutchlib.transaction import sign_transaction_dict
    from clutchlib_cli.util import check_or_exit, read_input

    check_or_exit(bool(args.private_key), 'A private key is required: use --private-key or CLUTCH_PRIVATE_KEY')

    try:
        signed = sign_transaction_dict(read_input(args.input), args.private_key)
    except ClutchError as e:
        print(f'Cannot sign transaction: {e}', file=sys.stderr)
        return 1

    print(json.dumps(signed.to_json_dict(), indent=2))
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
