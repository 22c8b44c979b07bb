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

"""
Top-level entry points: write the version header followed by the root value.

The output of `dumps(5)` is `04 08 69 0a`: the version header, the small integer tag and 5 in compact form.
"""

from typing import Any, Optional, TypeVar

from structlog import get_logger

from objmarshal.conf.get_settings import get_global_settings
from objmarshal.conf.settings import MarshalSettings
from objmarshal.consts import VERSION_HEADER
from objmarshal.exceptions import DepthExceededError, InvalidConfigurationError
from objmarshal.marshal.dispatcher import MarshalWriter
from objmarshal.marshal.object_model import ObjectModel, PythonObjectModel
from objmarshal.marshal.reference_tables import ReferenceTables
from objmarshal.serialization import Serializer
from objmarshal.serialization.sink_serializer import is_sink

logger = get_logger()

SinkT = TypeVar('SinkT')


def validate_depth(depth: Any) -> int:
    """Check a caller-supplied depth limit, any negative value means unlimited."""
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise InvalidConfigurationError(f"can't convert {type(depth).__name__} into Integer")
    return depth


class MarshalEncoder:
    """Encodes object graphs, each call to `encode` is independent and uses its own reference tables."""

    def __init__(
        self,
        object_model: Optional[ObjectModel] = None,
        *,
        settings: Optional[MarshalSettings] = None,
    ) -> None:
        self.object_model = object_model if object_model is not None else PythonObjectModel()
        self.settings = settings if settings is not None else get_global_settings()
        self.log = logger.new(object_model=type(self.object_model).__name__)

    def encode(self, obj: Any, serializer: Serializer, depth: Optional[int] = None) -> None:
        """Write the version header and `obj` to `serializer`.

        When this raises, whatever was already written to the serializer must be discarded.
        """
        depth = validate_depth(self.settings.DEPTH_LIMIT if depth is None else depth)
        if depth == 0:
            raise DepthExceededError('exceed depth limit')
        tables = ReferenceTables()
        writer = MarshalWriter(serializer, self.object_model, tables)
        self.log.debug('encode started', root_type=type(obj).__name__, depth=depth)
        pos0 = serializer.cur_pos()
        try:
            serializer.write_bytes(VERSION_HEADER)
            writer.write_value(obj, depth)
        except Exception as e:
            self.log.debug('encode failed', error=repr(e), written=serializer.cur_pos() - pos0)
            raise
        self.log.debug(
            'encode finished',
            size=serializer.cur_pos() - pos0,
            objects=len(tables.objects),
            symbols=len(tables.symbols),
        )

    def dumps(self, obj: Any, depth: Optional[int] = None, *, max_bytes: Optional[int] = None) -> bytes:
        """Encode `obj` and return the resulting bytes."""
        if max_bytes is None:
            max_bytes = self.settings.MAX_OUTPUT_BYTES
        serializer = Serializer.build_bytes_serializer()
        self.encode(obj, serializer.with_optional_max_bytes(max_bytes), depth)
        return bytes(serializer.finalize())

    def dump(self, obj: Any, sink: SinkT, depth: Optional[int] = None, *, stream: bool = False) -> SinkT:
        """Encode `obj` into `sink` and return `sink`.

        By default the result is buffered and written with a single `write` call. With `stream=True` every piece is
        written as soon as it is produced, and a failed encode leaves a partial output in the sink.
        """
        if not is_sink(sink):
            raise InvalidConfigurationError('instance of IO needed')
        if stream:
            self.encode(obj, Serializer.build_sink_serializer(sink), depth)
        else:
            sink.write(self.dumps(obj, depth))  # type: ignore[attr-defined]
        return sink


def dumps(
    obj: Any,
    depth: Optional[int] = None,
    *,
    object_model: Optional[ObjectModel] = None,
    max_bytes: Optional[int] = None,
) -> bytes:
    """Encode `obj` and return the bytes, `depth` limits nesting of sequences and mappings (-1 for no limit)."""
    return MarshalEncoder(object_model).dumps(obj, depth, max_bytes=max_bytes)


def dump(
    obj: Any,
    sink: SinkT,
    depth: Optional[int] = None,
    *,
    object_model: Optional[ObjectModel] = None,
    stream: bool = False,
) -> SinkT:
    """Encode `obj` into `sink`, which only needs a `write(bytes)` method, and return `sink`."""
    return MarshalEncoder(object_model).dump(obj, sink, depth, stream=stream)
