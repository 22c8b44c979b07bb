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

from pathlib import Path
from typing import Optional, Union

from pydantic import StrictInt, field_validator

from objmarshal.consts import UNLIMITED_DEPTH
from objmarshal.utils.pydantic import BaseModel
from objmarshal.utils.yaml import dict_from_yaml


class MarshalSettings(BaseModel):
    # Nesting allowance used when a call does not pass its own depth, any negative value means no limit
    DEPTH_LIMIT: StrictInt = UNLIMITED_DEPTH

    # Largest output `dumps` may produce, `None` for no limit
    MAX_OUTPUT_BYTES: Optional[StrictInt] = None

    @field_validator('DEPTH_LIMIT')
    @classmethod
    def _check_depth_limit(cls, depth: int) -> int:
        if depth == 0:
            raise ValueError('DEPTH_LIMIT of 0 would reject every value')
        return depth

    @field_validator('MAX_OUTPUT_BYTES')
    @classmethod
    def _check_max_output_bytes(cls, max_bytes: Optional[int]) -> Optional[int]:
        if max_bytes is not None and max_bytes < 2:
            raise ValueError('MAX_OUTPUT_BYTES must leave room for the version header')
        return max_bytes

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'MarshalSettings':
        """Takes a filepath to a yaml file and returns a validated MarshalSettings instance."""
        settings_dict = dict_from_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
