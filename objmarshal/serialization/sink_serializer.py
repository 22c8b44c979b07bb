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

from typing import Protocol

from typing_extensions import override

from .serializer import Serializer
from .types import Buffer


class Sink(Protocol):
    def write(self, data: bytes, /) -> object:
        ...


def is_sink(obj: object) -> bool:
    """Whether `obj` can be used as an output sink."""
    return callable(getattr(obj, 'write', None))


class SinkSerializer(Serializer):
    """Implementation of Serializer that forwards every write to a sink.

    Nothing is buffered, a failed encode leaves whatever was already written in the sink and it is up to the caller to
    discard it. Errors raised by the sink (usually `OSError`) are propagated as is.
    """

    def __init__(self, sink: Sink) -> None:
        if not is_sink(sink):
            raise TypeError('instance of IO needed')
        self.sink = sink
        self._pos: int = 0

    @override
    def cur_pos(self) -> int:
        return self._pos

    @override
    def write_byte(self, data: int) -> None:
        self.sink.write(int.to_bytes(data, length=1, byteorder='big'))
        self._pos += 1

    @override
    def write_bytes(self, data: Buffer) -> None:
        part = bytes(data)
        self.sink.write(part)
        self._pos += len(part)
