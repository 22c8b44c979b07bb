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

import os
from typing import NamedTuple, Optional

from pydantic import ValidationError
from structlog import get_logger

from objmarshal.conf.settings import MarshalSettings
from objmarshal.exceptions import InvalidConfigurationError

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'OBJMARSHAL_CONFIG_YAML'


class _SettingsMetadata(NamedTuple):
    source: Optional[str]
    settings: MarshalSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> MarshalSettings:
    """
    Returns the settings used when an encoder is not given its own.

    They are loaded from the yaml filepath in the 'OBJMARSHAL_CONFIG_YAML' env var, if it is not set the defaults are
    used. The result is cached, loading again from a different file raises.
    """
    return _load_settings_singleton(os.environ.get(CONFIG_YAML_ENV_VAR))


def get_settings_source() -> Optional[str]:
    """ Returns the path of the YAML file that was loaded, None when the defaults are in use.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def reset_settings() -> None:
    """Forget the loaded settings, only meant for tests."""
    global _settings_singleton
    _settings_singleton = None


def _load_settings_singleton(source: Optional[str]) -> MarshalSettings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise InvalidConfigurationError('loading config twice with a different file')
        return _settings_singleton.settings

    _settings_singleton = _SettingsMetadata(source=source, settings=_load_settings(source))
    return _settings_singleton.settings


def _load_settings(source: Optional[str]) -> MarshalSettings:
    if source is None:
        return MarshalSettings()
    log = logger.new(source=source)
    log.debug('loading settings from yaml')
    try:
        return MarshalSettings.from_yaml(filepath=source)
    except (ValidationError, ValueError) as e:
        raise InvalidConfigurationError(f'invalid settings in {source!r}: {e}') from e
