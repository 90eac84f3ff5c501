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

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, ValidationError


class BaseModel(PydanticBaseModel):
    """Project-wide base for pydantic models.

    Instances are frozen and unknown fields are rejected.
    """
    model_config = ConfigDict(extra='forbid', frozen=True)


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single line, like `fare: Input should be an integer`."""
    parts = []
    for item in error.errors():
        location = '.'.join(str(loc) for loc in item['loc']) or '<root>'
        parts.append(f'{location}: {item["msg"]}')
    return '; '.join(parts)
