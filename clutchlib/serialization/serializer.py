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

from .types import Buffer


class Serializer:
    """In-memory byte writer used by the encoders in `clutchlib.serialization.encoding`.

    Writes are kept as a list of memoryviews and only joined when `finalize` is called. Encoders that need to know
    the size of a payload before writing its header (RLP lists, for instance) build it on a nested serializer and
    then write the result with `write_bytes`.
    """

    __slots__ = ('_parts', '_pos', '_finalized')

    def __init__(self) -> None:
        self._parts: list[memoryview] = []
        self._pos: int = 0
        self._finalized = False

    def cur_pos(self) -> int:
        return self._pos

    def write_byte(self, data: int) -> None:
        """Append one byte, `data` must be in [0, 255]."""
        self._check_not_finalized()
        # int.to_bytes checks for correct range
        self._parts.append(memoryview(int.to_bytes(data, length=1, byteorder='big')))
        self._pos += 1

    def write_bytes(self, data: Buffer) -> None:
        self._check_not_finalized()
        part = memoryview(data)
        self._parts.append(part)
        self._pos += len(part)

    def write_struct(self, data: tuple[Any, ...], format: str) -> None:
        self.write_bytes(struct.pack(format, *data))

    def finalize(self) -> bytes:
        """Join everything written so far. Any further write raises TypeError."""
        self._check_not_finalized()
        self._finalized = True
        result = b''.join(self._parts)
        self._parts.clear()
        return result

    def _check_not_finalized(self) -> None:
        if self._finalized:
            raise TypeError('serializer was already finalized')
