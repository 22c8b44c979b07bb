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

r"""
Encoders for values that hold other values: text with attributes, regular expressions, sequences, mappings, records,
generic objects and the two custom hooks.

They are only called after the value got a fresh slot in the object table, a back-reference never reaches them.
Each encoder is a generator: it writes its own framing to the serializer and yields every nested value, together with
the depth allowance for it, at the point where that value belongs in the output. `MarshalWriter.write_value` writes
each yielded value completely before resuming the encoder.

Text, regular expressions, sequences and mappings share the same framing:

    [I if attributes][e <mixin symbol>]*[C <class symbol> if subclass]<tag><payload>[<count> (<symbol> <value>)*]

The leading `I` and the trailing attribute list only appear when the value has attributes. Records and generic objects
only take the `e` part of the framing, and generic objects always write their attribute list, even when it is empty:

    [e <mixin symbol>]*o<class symbol><count>(<symbol> <value>)*
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Iterator

from objmarshal.consts import (
    REGEXP_EXTENDED,
    REGEXP_IGNORECASE,
    REGEXP_MULTILINE,
    TYPE_ARRAY,
    TYPE_EXTENDED,
    TYPE_HASH,
    TYPE_HASH_DEF,
    TYPE_IVAR,
    TYPE_OBJECT,
    TYPE_REGEXP,
    TYPE_STRING,
    TYPE_STRUCT,
    TYPE_UCLASS,
    TYPE_USERDEF,
    TYPE_USRMARSHAL,
)
from objmarshal.exceptions import DepthExceededError, WrongHookReturnTypeError
from objmarshal.marshal.types import OPAQUE_HOOK, DefaultValueDict, OpaqueEncodable, StateCapturable, Symbol
from objmarshal.serialization.encoding.bytes import encode_bytes
from objmarshal.serialization.encoding.compact_int import encode_compact_int

if TYPE_CHECKING:
    from objmarshal.marshal.dispatcher import MarshalWriter

CANONICAL_TEXT_TYPES = (str, bytes, bytearray)
CANONICAL_SEQUENCE_TYPES = (list, tuple)
CANONICAL_MAP_TYPES = (dict, DefaultValueDict)

Attributes = list[tuple[Symbol, Any]]

# nested values still to be written, in output order, each with the depth allowance it gets
Children = Iterator[tuple[Any, int]]


def enter_container(depth: int) -> int:
    """Check the depth allowance before entering a container and return what is left for its contents."""
    if depth == 0:
        raise DepthExceededError('exceed depth limit')
    return depth - 1


def text_to_bytes(value: str | bytes | bytearray) -> bytes:
    """UTF-8 bytes of a text, lone surrogates are kept as their 3-byte form."""
    if isinstance(value, str):
        return value.encode('utf-8', 'surrogatepass')
    return bytes(value)


def regexp_options(pattern: re.Pattern) -> int:
    """Option bits of a compiled pattern, only ignore-case, verbose and dot-all have a counterpart."""
    options = 0
    if pattern.flags & re.IGNORECASE:
        options |= REGEXP_IGNORECASE
    if pattern.flags & re.VERBOSE:
        options |= REGEXP_EXTENDED
    if pattern.flags & re.DOTALL:
        options |= REGEXP_MULTILINE
    return options


def write_attributes_prefix(writer: MarshalWriter, attributes: Attributes) -> None:
    if attributes:
        writer.serializer.write_tag(TYPE_IVAR)


def write_attributes_suffix(
    writer: MarshalWriter,
    attributes: Attributes,
    depth: int,
    *,
    force: bool = False,
) -> Children:
    if not (force or attributes):
        return
    encode_compact_int(writer.serializer, len(attributes))
    for name, value in attributes:
        writer.write_symbol(name)
        yield value, depth


def write_extension_chain(writer: MarshalWriter, value: Any) -> None:
    for name in writer.object_model.walk_extension_chain(value):
        writer.serializer.write_tag(TYPE_EXTENDED)
        writer.write_symbol(Symbol(name))


def write_subclass_marker(writer: MarshalWriter, value: Any, canonical_types: tuple[type, ...]) -> None:
    if type(value) not in canonical_types:
        writer.serializer.write_tag(TYPE_UCLASS)
        writer.write_class_name(value)


def encode_text(writer: MarshalWriter, value: str | bytes | bytearray, depth: int) -> Children:
    attributes = writer.object_model.enumerate_attributes(value)
    write_attributes_prefix(writer, attributes)
    write_extension_chain(writer, value)
    write_subclass_marker(writer, value, CANONICAL_TEXT_TYPES)
    writer.serializer.write_tag(TYPE_STRING)
    encode_bytes(writer.serializer, text_to_bytes(value))
    yield from write_attributes_suffix(writer, attributes, depth)


def encode_regexp(writer: MarshalWriter, value: re.Pattern, depth: int) -> Children:
    attributes = writer.object_model.enumerate_attributes(value)
    write_attributes_prefix(writer, attributes)
    write_extension_chain(writer, value)
    write_subclass_marker(writer, value, (re.Pattern,))
    writer.serializer.write_tag(TYPE_REGEXP)
    encode_bytes(writer.serializer, text_to_bytes(value.pattern))
    writer.serializer.write_byte(regexp_options(value))
    yield from write_attributes_suffix(writer, attributes, depth)


def encode_sequence(writer: MarshalWriter, value: list | tuple, depth: int) -> Children:
    depth = enter_container(depth)
    attributes = writer.object_model.enumerate_attributes(value)
    write_attributes_prefix(writer, attributes)
    write_extension_chain(writer, value)
    write_subclass_marker(writer, value, CANONICAL_SEQUENCE_TYPES)
    writer.serializer.write_tag(TYPE_ARRAY)
    encode_compact_int(writer.serializer, len(value))
    for element in value:
        yield element, depth
    yield from write_attributes_suffix(writer, attributes, depth)


def encode_map(writer: MarshalWriter, value: dict, depth: int) -> Children:
    depth = enter_container(depth)
    default = writer.object_model.get_map_default(value)
    attributes = writer.object_model.enumerate_attributes(value)
    write_attributes_prefix(writer, attributes)
    write_extension_chain(writer, value)
    write_subclass_marker(writer, value, CANONICAL_MAP_TYPES)
    writer.serializer.write_tag(TYPE_HASH if default is None else TYPE_HASH_DEF)
    encode_compact_int(writer.serializer, len(value))
    for key, item in value.items():
        yield key, depth
        yield item, depth
    if default is not None:
        yield default, depth
    yield from write_attributes_suffix(writer, attributes, depth)


def encode_record(writer: MarshalWriter, value: tuple, depth: int) -> Children:
    write_extension_chain(writer, value)
    writer.serializer.write_tag(TYPE_STRUCT)
    writer.write_class_name(value)
    fields: tuple[str, ...] = type(value)._fields  # type: ignore[attr-defined]
    encode_compact_int(writer.serializer, len(fields))
    for name, item in zip(fields, value):
        writer.write_symbol(Symbol(name))
        yield item, depth


def encode_object(writer: MarshalWriter, value: Any, depth: int) -> Children:
    attributes = writer.object_model.enumerate_attributes(value)
    write_extension_chain(writer, value)
    writer.serializer.write_tag(TYPE_OBJECT)
    writer.write_class_name(value)
    yield from write_attributes_suffix(writer, attributes, depth, force=True)


def encode_opaque(writer: MarshalWriter, value: OpaqueEncodable, depth: int) -> Children:
    # hooks are called through the type, the same place the object model found them
    data = type(value).__marshal_dump__(value, depth)
    if not isinstance(data, (bytes, bytearray)):
        raise WrongHookReturnTypeError(f'{OPAQUE_HOOK}() must return bytes, got {type(data).__name__}')
    # attributes of the returned blob travel with it, the object itself only contributes its class name
    attributes = writer.object_model.enumerate_attributes(data)
    write_attributes_prefix(writer, attributes)
    writer.serializer.write_tag(TYPE_USERDEF)
    writer.write_class_name(value)
    encode_bytes(writer.serializer, bytes(data))
    yield from write_attributes_suffix(writer, attributes, depth)


def encode_state(writer: MarshalWriter, value: StateCapturable, depth: int) -> Children:
    state = type(value).__marshal_state__(value)
    writer.serializer.write_tag(TYPE_USRMARSHAL)
    writer.write_class_name(value)
    yield state, depth
