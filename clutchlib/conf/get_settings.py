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

import os
from pathlib import Path
from typing import NamedTuple, Optional

from structlog import get_logger

from clutchlib.conf.settings import ClutchSettings
from clutchlib.utils.yaml import load_model_from_yaml

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'CLUTCH_CONFIG_YAML'

_conf_dir = Path(__file__).parent


class _LoadedSettings(NamedTuple):
    source: str
    settings: ClutchSettings


_settings_singleton: Optional[_LoadedSettings] = None


def load_settings(filepath: str) -> ClutchSettings:
    """Load settings from a yaml file, bypassing the global singleton."""
    return load_model_from_yaml(ClutchSettings, filepath, fallback_dir=_conf_dir)


def get_global_settings() -> ClutchSettings:
    """ Return the process wide settings.

    The yaml file is taken from the `CLUTCH_CONFIG_YAML` environment variable, or the bundled default.yml when unset.
    It is loaded once; asking again with the variable pointing somewhere else is an error.
    """
    global _settings_singleton

    source = os.environ.get(CONFIG_YAML_ENV_VAR, str(_conf_dir / 'default.yml'))

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')
        return _settings_singleton.settings

    settings = load_settings(source)
    logger.debug('settings loaded', source=source, network=settings.NETWORK_NAME)
    _settings_singleton = _LoadedSettings(source=source, settings=settings)
    return settings


def _reset_global_settings() -> None:
    """Forget the loaded settings. Only meant for tests."""
    global _settings_singleton
    _settings_singleton = None
