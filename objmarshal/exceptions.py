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

from objmarshal.serialization.exceptions import SerializationError


class MarshalError(SerializationError):
    """Base class for errors raised while encoding an object graph.

    Any of these aborts the whole encode, output produced up to that point must be discarded.
    """


class DepthExceededError(MarshalError, ValueError):
    """The depth limit was reached before entering a nested container."""


class AnonymousTypeError(MarshalError, TypeError):
    """A class or module has no name that can be written."""


class UnsupportedDefaultGeneratorError(MarshalError, TypeError):
    """A mapping computes missing values with a callable instead of holding a plain default."""


class WrongHookReturnTypeError(MarshalError, TypeError):
    """A custom byte-producing hook returned something other than a byte sequence."""


class InvalidConfigurationError(MarshalError, TypeError):
    """The caller supplied options that cannot be used together or have the wrong type."""
