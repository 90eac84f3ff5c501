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

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import IntEnum
from typing import Annotated, Any, ClassVar

from pydantic import AllowInfNan, BeforeValidator, ValidationError
from typing_extensions import Self

from clutchlib.exceptions import MalformedArguments, UnsupportedCallType
from clutchlib.serialization.encoding.float64 import bits_to_float, float_to_bits
from clutchlib.serialization.encoding.rlp import RLPEncodable, RLPItem, decode_uint, rlp_encode
from clutchlib.utils.pydantic import BaseModel, format_validation_error


class FunctionCallTag(IntEnum):
    """Numeric id of each kind of function call. It is the first element of an encoded call."""

    RIDE_REQUEST = 1

    @property
    def wire_name(self) -> str:
        """Name used by the API in `function_call_type`."""
        return _WIRE_NAMES[self]

    @classmethod
    def from_wire_name(cls, name: str) -> 'FunctionCallTag':
        for tag, wire_name in _WIRE_NAMES.items():
            if wire_name == name:
                return tag
        raise UnsupportedCallType(f'unsupported function call type: {name!r}')

    def get_cls(self) -> type['FunctionCall']:
        from clutchlib.function_calls.ride_request import RideRequest

        cls_map: dict[FunctionCallTag, type[FunctionCall]] = {
            FunctionCallTag.RIDE_REQUEST: RideRequest,
        }

        cls = cls_map.get(self)
        if cls is None:
            raise UnsupportedCallType(f'no function call registered for tag {self!r}')
        return cls


_WIRE_NAMES: dict[FunctionCallTag, str] = {
    FunctionCallTag.RIDE_REQUEST: 'RideRequest',
}


def _require_number(value: Any) -> float:
    # pydantic would otherwise take bools and numeric strings
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f'expected a number, got {type(value).__name__}')
    try:
        return float(value)
    except OverflowError:
        raise ValueError('number does not fit in a float64')


CoordinateValue = Annotated[float, AllowInfNan(False), BeforeValidator(_require_number)]


class Coordinates(BaseModel):
    latitude: CoordinateValue
    longitude: CoordinateValue

    def get_rlp_args(self) -> list[RLPEncodable]:
        return [float_to_bits(self.latitude), float_to_bits(self.longitude)]

    @classmethod
    def from_rlp_args(cls, args: RLPItem) -> 'Coordinates':
        if not isinstance(args, list) or len(args) != 2:
            raise MalformedArguments('coordinates must be a list of 2 items')
        latitude, longitude = (bits_to_float(decode_uint(item)) for item in args)
        return cls.parse({'latitude': latitude, 'longitude': longitude})

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> 'Coordinates':
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedArguments(format_validation_error(e)) from e


class FunctionCall(BaseModel, ABC):
    """Base class of the calls a transaction can carry.

    A call is encoded as the RLP list `[tag, args]`, where `args` is whatever `get_rlp_args` returns. Each subclass
    sets `tag` and must be registered in `FunctionCallTag.get_cls`.
    """

    tag: ClassVar[FunctionCallTag]

    @property
    def wire_name(self) -> str:
        return self.tag.wire_name

    @abstractmethod
    def get_rlp_args(self) -> list[RLPEncodable]:
        """Return the arguments of this call, ready to be RLP encoded."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def from_rlp_args(cls, args: RLPItem) -> Self:
        """Build the call back from its decoded arguments. Raises MalformedArguments."""
        raise NotImplementedError

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> Self:
        """Validate canonical field names into a call, translating validation errors to MalformedArguments."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedArguments(f'invalid {cls.tag.wire_name} arguments: {format_validation_error(e)}') from e

    def get_rlp_item(self) -> list[RLPEncodable]:
        return [int(self.tag), self.get_rlp_args()]

    def encode(self) -> bytes:
        """Return the RLP encoding of `[tag, args]`."""
        return rlp_encode(self.get_rlp_item())
