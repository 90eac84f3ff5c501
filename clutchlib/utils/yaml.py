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

from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel

from clutchlib.utils.dict import deep_merge

EXTENDS_KEY = 'extends'

M = TypeVar('M', bound=BaseModel)


def read_yaml_dict(path: Union[Path, str]) -> dict[str, Any]:
    """Load a yaml file that must hold a mapping. An empty file counts as an empty mapping."""
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"'{path}' is not a file")

    with path.open('r') as stream:
        loaded = yaml.safe_load(stream)

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"'{path}' does not contain a mapping")
    return loaded


def read_extended_yaml_dict(path: Union[Path, str], *, fallback_dir: Optional[Path] = None,
                            _seen: Optional[frozenset[Path]] = None) -> dict[str, Any]:
    """
    Load a yaml mapping, following its `extends` key.

    `extends` names another yaml file, either absolute or relative to the extending file. When it can't be found
    there, `fallback_dir` is tried next, so user files can extend the settings bundled with the package. Keys of the
    extending file override the ones it extends, nested mappings are merged. The `extends` key itself is dropped.
    """
    path = Path(path).resolve()
    seen = _seen or frozenset()
    if path in seen:
        raise ValueError(f"'{path}' extends itself")

    contents = read_yaml_dict(path)
    parent_name = contents.pop(EXTENDS_KEY, None)
    if not parent_name:
        return contents

    parent_path = path.parent / str(parent_name)
    if not parent_path.is_file() and fallback_dir is not None:
        parent_path = fallback_dir / str(parent_name)

    base = read_extended_yaml_dict(parent_path, fallback_dir=fallback_dir, _seen=seen | {path})
    return deep_merge(base, contents)


def load_model_from_yaml(model: type[M], path: Union[Path, str], *, fallback_dir: Optional[Path] = None) -> M:
    """Read an extended yaml file and validate it into `model`."""
    return model.model_validate(read_extended_yaml_dict(path, fallback_dir=fallback_dir))
