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

from typing import Union

from clutchlib.exceptions import MalformedArguments, UnsupportedCallType
from clutchlib.function_calls.base import Coordinates, FunctionCall, FunctionCallTag
from clutchlib.function_calls.ride_request import RideRequest
from clutchlib.serialization import SerializationError
from clutchlib.serialization.encoding.rlp import decode_uint, rlp_decode
from clutchlib.serialization.types import Buffer


def get_function_call_cls(tag: Union[FunctionCallTag, int, str]) -> type[FunctionCall]:
    """Resolve a tag id or a wire name (like 'RideRequest') into its FunctionCall class."""
    if isinstance(tag, str):
        return FunctionCallTag.from_wire_name(tag).get_cls()
    if isinstance(tag, bool) or not isinstance(tag, int):
        raise UnsupportedCallType(f'invalid function call tag: {tag!r}')
    try:
        resolved = FunctionCallTag(tag)
    except ValueError:
        raise UnsupportedCallType(f'unsupported function call tag: {tag}')
    return resolved.get_cls()


def encode_function_call(call: FunctionCall) -> bytes:
    """Encode a call as the RLP list `[tag, args]`."""
    return call.encode()


def decode_function_call(data: Buffer) -> FunctionCall:
    """Inverse of `encode_function_call`."""
    try:
        item = rlp_decode(data)
        if not isinstance(item, list) or len(item) != 2:
            raise MalformedArguments('function call must be a list of 2 items')
        tag_bytes, args = item
        tag = decode_uint(tag_bytes)
        return get_function_call_cls(tag).from_rlp_args(args)
    except (SerializationError, ValueError) as e:
        raise MalformedArguments(f'cannot decode function call: {e}') from e


__all__ = [
    'Coordinates',
    'FunctionCall',
    'FunctionCallTag',
    'RideRequest',
    'decode_function_call',
    'encode_function_call',
    'get_function_call_cls',
]
