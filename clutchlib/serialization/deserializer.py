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

import struct
from typing import Any

from .exceptions import OutOfDataError, TrailingDataError
from .types import Buffer


class Deserializer:
    """Reads values from a byte sequence.

    Keeps a memoryview that is shortened as bytes are consumed, so slicing never copies the underlying data.
    """

    __slots__ = ('_view',)

    def __init__(self, data: Buffer) -> None:
        self._view = memoryview(data)

    def is_empty(self) -> bool:
        return not self._view

    def remaining(self) -> int:
        return len(self._view)

    def peek_byte(self) -> int:
        """The next byte, left unconsumed."""
        if not self._view:
            raise OutOfDataError('unexpected end of data')
        return self._view[0]

    def read_byte(self) -> int:
        """Consume one byte and return it as an int in [0, 255]."""
        b = self.peek_byte()
        self._view = self._view[1:]
        return b

    def read_bytes(self, n: int) -> memoryview:
        """Read exactly n bytes."""
        if n < 0:
            raise ValueError(f'cannot read a negative number of bytes: {n}')
        if len(self._view) < n:
            raise OutOfDataError(f'not enough bytes to read: wanted {n}, have {len(self._view)}')
        b = self._view[:n]
        self._view = self._view[n:]
        return b

    def read_struct(self, format: str) -> tuple[Any, ...]:
        data = self.read_bytes(struct.calcsize(format))
        return struct.unpack(format, data)

    def finalize(self) -> None:
        """Raise TrailingDataError unless every byte was consumed."""
        if self._view:
            raise TrailingDataError(f'trailing data: {len(self._view)} bytes')
