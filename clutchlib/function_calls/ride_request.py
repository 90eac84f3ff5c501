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

from typing import Annotated

from pydantic import Field
from typing_extensions import Self

from clutchlib.exceptions import MalformedArguments
from clutchlib.function_calls.base import Coordinates, FunctionCall, FunctionCallTag
from clutchlib.serialization.encoding.rlp import RLPEncodable, RLPItem, decode_uint

Fare = Annotated[int, Field(strict=True, ge=0)]


class RideRequest(FunctionCall):
    """Ask for a ride from `pickup` to `dropoff`, paying `fare`.

    Arguments are encoded as `[[pickup_lat, pickup_lng], [dropoff_lat, dropoff_lng], fare]`, each coordinate being
    the binary64 bit pattern of the value as an unsigned integer.
    """

    tag = FunctionCallTag.RIDE_REQUEST

    pickup: Coordinates
    dropoff: Coordinates
    fare: Fare

    def get_rlp_args(self) -> list[RLPEncodable]:
        return [self.pickup.get_rlp_args(), self.dropoff.get_rlp_args(), self.fare]

    @classmethod
    def from_rlp_args(cls, args: RLPItem) -> Self:
        if not isinstance(args, list) or len(args) != 3:
            raise MalformedArguments('RideRequest arguments must be a list of 3 items')
        pickup, dropoff, fare = args
        return cls(
            pickup=Coordinates.from_rlp_args(pickup),
            dropoff=Coordinates.from_rlp_args(dropoff),
            fare=decode_uint(fare),
        )
