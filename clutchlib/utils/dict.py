#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Optional, TypeVar

K = TypeVar('K')

_MISSING = object()


def deep_merge(first_dict: dict[K, Any], second_dict: dict[K, Any]) -> dict[K, Any]:
    """
    Recursively merges two dicts, returning a new one. Values from `second_dict` win, both inputs are left intact.

    >>> base = dict(API_URL='http://a', HEADERS=dict(x=1, y=2))
    >>> override = dict(HEADERS=dict(y=3))
    >>> deep_merge(base, override) == dict(API_URL='http://a', HEADERS=dict(x=1, y=3))
    True
    >>> base == dict(API_URL='http://a', HEADERS=dict(x=1, y=2))
    True
    """
    merged = deepcopy(first_dict)

    def do_deep_merge(first: dict[K, Any], second: dict[K, Any]) -> dict[K, Any]:
        for key, value in second.items():
            if isinstance(first.get(key), dict) and isinstance(value, dict):
                do_deep_merge(first[key], value)
            else:
                first[key] = deepcopy(value)
        return first

    return do_deep_merge(merged, second_dict)


def get_first_of(data: Mapping[str, Any], *keys: str) -> Optional[Any]:
    """Return the value of the first key present in `data` (even if the value is falsy), or None.

    Used to accept the field aliases the API is known to send, like `latitude`/`lat`.

    >>> get_first_of({'lat': 0.0, 'latitude': None}, 'latitude', 'lat')
    0.0
    >>> get_first_of({'lng': 1.5}, 'longitude', 'lng')
    1.5
    >>> get_first_of({}, 'fare') is None
    True
    """
    for key in keys:
        value = data.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return None
