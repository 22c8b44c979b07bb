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


from typing import Generic, TypeVar

from typing_extensions import override

from objmarshal.serialization.exceptions import SerializationError
from objmarshal.serialization.serializer import Serializer

from ..types import Buffer

S = TypeVar('S', bound=Serializer)


class MaxBytesExceededError(SerializationError):
    """ This error is raised when the wrapped serializer reached its maximum bytes written.

    The check happens before anything reaches the wrapped serializer, so the write that fails is never partially
    applied. Everything written before it is still there and must be discarded by whoever handles this exception.
    """
    pass


class MaxBytesSerializer(Serializer, Generic[S]):
    """Wraps another serializer and refuses writes that would go beyond `max_bytes`.

    Only writes made through this wrapper are counted, bytes already in the wrapped serializer are not.
    """
    inner: S

    def __init__(self, serializer: S, max_bytes: int) -> None:
        self.inner = serializer
        self.max_bytes = max_bytes
        self._bytes_left = max_bytes

    def _reserve(self, write_size: int) -> None:
        if write_size > self._bytes_left:
            self._bytes_left = -1
            raise MaxBytesExceededError(f'output exceeds {self.max_bytes} bytes')
        self._bytes_left -= write_size

    @override
    def finalize(self) -> Buffer:
        return self.inner.finalize()

    @override
    def cur_pos(self) -> int:
        return self.inner.cur_pos()

    @override
    def write_byte(self, data: int) -> None:
        self._reserve(1)
        self.inner.write_byte(data)

    @override
    def write_bytes(self, data: Buffer) -> None:
        data_view = memoryview(data)
        self._reserve(len(data_view))
        self.inner.write_bytes(data_view)
