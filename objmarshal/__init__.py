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

from objmarshal.exceptions import (
    AnonymousTypeError,
    DepthExceededError,
    InvalidConfigurationError,
    MarshalError,
    UnsupportedDefaultGeneratorError,
    WrongHookReturnTypeError,
)
from objmarshal.marshal.encoder import MarshalEncoder, dump, dumps
from objmarshal.marshal.object_model import ObjectModel, PythonObjectModel
from objmarshal.marshal.types import DefaultValueDict, HookKind, Symbol, extend_object
from objmarshal.version import __version__

__all__ = [
    'AnonymousTypeError',
    'DefaultValueDict',
    'DepthExceededError',
    'HookKind',
    'InvalidConfigurationError',
    'MarshalEncoder',
    'MarshalError',
    'ObjectModel',
    'PythonObjectModel',
    'Symbol',
    'UnsupportedDefaultGeneratorError',
    'WrongHookReturnTypeError',
    'dump',
    'dumps',
    'extend_object',
    '__version__',
]
