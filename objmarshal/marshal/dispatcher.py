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
The dispatcher decides how each value is written and drives the descent into nested values.

Every value is first classified into one `ValueKind`. The selection order is:

1. a type exposing `__marshal_dump__` is `OPAQUE`
2. a type exposing `__marshal_state__` is `STATE`
3. the built-in kinds, matched on the Python type
4. `OBJECT` for anything else

Nil, booleans and small integers are written inline. Symbols go through the symbol table and every other value goes
through the object table before its kind-specific encoder runs, so a repeated value is written as a back-reference.
"""

from __future__ import annotations

import re
from enum import Enum, unique
from types import ModuleType
from typing import Any, Callable, Optional

from objmarshal.consts import (
    SMALL_INT_MAX,
    SMALL_INT_MIN,
    TYPE_BIGNUM,
    TYPE_CLASS,
    TYPE_FALSE,
    TYPE_FIXNUM,
    TYPE_FLOAT,
    TYPE_LINK,
    TYPE_MODULE,
    TYPE_NIL,
    TYPE_SYMBOL,
    TYPE_SYMLINK,
    TYPE_TRUE,
)
from objmarshal.marshal import compound
from objmarshal.marshal.object_model import ObjectModel
from objmarshal.marshal.reference_tables import ReferenceTables
from objmarshal.marshal.types import HookKind, Symbol
from objmarshal.serialization import Serializer
from objmarshal.serialization.encoding.bignum import encode_bignum
from objmarshal.serialization.encoding.bytes import encode_bytes
from objmarshal.serialization.encoding.compact_int import encode_compact_int
from objmarshal.serialization.encoding.float import encode_float

TEXT_TYPES = (str, bytes, bytearray)
SEQUENCE_TYPES = (list, tuple)


@unique
class ValueKind(Enum):
    NIL = 'nil'
    BOOL = 'bool'
    SMALL_INT = 'small_int'
    BIGNUM = 'bignum'
    FLOAT = 'float'
    SYMBOL = 'symbol'
    TEXT = 'text'
    REGEXP = 'regexp'
    SEQUENCE = 'sequence'
    MAP = 'map'
    RECORD = 'record'
    CLASS = 'class'
    MODULE = 'module'
    OBJECT = 'object'
    OPAQUE = 'opaque'
    STATE = 'state'


# kinds that never take a slot in the object table
UNLINKED_KINDS = frozenset({ValueKind.NIL, ValueKind.BOOL, ValueKind.SMALL_INT, ValueKind.SYMBOL})


def is_record(value: Any) -> bool:
    return isinstance(value, tuple) and isinstance(getattr(type(value), '_fields', None), tuple)


def classify(value: Any, object_model: ObjectModel) -> ValueKind:
    """Select the encoding rule for a value."""
    hook = object_model.detect_custom_hook(value)
    if hook is HookKind.OPAQUE:
        return ValueKind.OPAQUE
    if hook is HookKind.STATE:
        return ValueKind.STATE
    if value is None:
        return ValueKind.NIL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        if SMALL_INT_MIN <= value <= SMALL_INT_MAX:
            return ValueKind.SMALL_INT
        return ValueKind.BIGNUM
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, Symbol):
        return ValueKind.SYMBOL
    if isinstance(value, TEXT_TYPES):
        return ValueKind.TEXT
    if isinstance(value, re.Pattern):
        return ValueKind.REGEXP
    if is_record(value):
        return ValueKind.RECORD
    if isinstance(value, SEQUENCE_TYPES):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAP
    if isinstance(value, type):
        return ValueKind.CLASS
    if isinstance(value, ModuleType):
        return ValueKind.MODULE
    return ValueKind.OBJECT


class MarshalWriter:
    """Writes values to a serializer, keeping the reference tables of a single encode.

    Nested values are not written by recursion. Encoders of values that hold other values are generators that write
    their own framing and yield each nested `(value, depth)` in output order, `write_value` keeps the pending encoders
    on an explicit stack. How deep a graph can be is only limited by the depth allowance and by memory.
    """

    def __init__(
        self,
        serializer: Serializer,
        object_model: ObjectModel,
        tables: Optional[ReferenceTables] = None,
    ) -> None:
        self.serializer = serializer
        self.object_model = object_model
        self.tables = tables if tables is not None else ReferenceTables()

    def write_value(self, value: Any, depth: int) -> None:
        """Write any value, `depth` is the remaining nesting allowance (-1 is unlimited)."""
        pending: list[compound.Children] = []
        children = self._write_one(value, depth)
        if children is not None:
            pending.append(children)
        while pending:
            try:
                value, depth = next(pending[-1])
            except StopIteration:
                pending.pop()
                continue
            children = self._write_one(value, depth)
            if children is not None:
                pending.append(children)

    def _write_one(self, value: Any, depth: int) -> Optional[compound.Children]:
        """Write a single value, returning the encoder of its contents when it has any."""
        kind = classify(value, self.object_model)
        if kind not in UNLINKED_KINDS:
            backref = self.tables.objects.lookup_or_register(value)
            if backref is not None:
                self.serializer.write_tag(TYPE_LINK)
                encode_compact_int(self.serializer, backref.index)
                return None
        return _HANDLERS[kind](self, value, depth)

    def write_symbol(self, symbol: Symbol) -> None:
        backref = self.tables.symbols.lookup_or_register(symbol)
        if backref is not None:
            self.serializer.write_tag(TYPE_SYMLINK)
            encode_compact_int(self.serializer, backref.index)
            return
        self.serializer.write_tag(TYPE_SYMBOL)
        encode_bytes(self.serializer, compound.text_to_bytes(symbol.name))

    def write_class_name(self, value: Any) -> None:
        """Write the class name of `value` as a symbol."""
        self.write_symbol(Symbol(self.object_model.resolve_class_name(value)))

    def _write_nil(self, value: None, depth: int) -> None:
        self.serializer.write_tag(TYPE_NIL)

    def _write_bool(self, value: bool, depth: int) -> None:
        self.serializer.write_tag(TYPE_TRUE if value else TYPE_FALSE)

    def _write_small_int(self, value: int, depth: int) -> None:
        self.serializer.write_tag(TYPE_FIXNUM)
        encode_compact_int(self.serializer, value)

    def _write_bignum(self, value: int, depth: int) -> None:
        self.serializer.write_tag(TYPE_BIGNUM)
        encode_bignum(self.serializer, value)

    def _write_float(self, value: float, depth: int) -> None:
        self.serializer.write_tag(TYPE_FLOAT)
        encode_float(self.serializer, value)

    def _write_symbol(self, value: Symbol, depth: int) -> None:
        self.write_symbol(value)

    def _write_class(self, value: type, depth: int) -> None:
        name = self.object_model.resolve_class_name(value)
        self.serializer.write_tag(TYPE_CLASS)
        encode_bytes(self.serializer, compound.text_to_bytes(name))

    def _write_module(self, value: ModuleType, depth: int) -> None:
        name = self.object_model.resolve_module_name(value)
        self.serializer.write_tag(TYPE_MODULE)
        encode_bytes(self.serializer, compound.text_to_bytes(name))


# scalar handlers return None, handlers of values with contents return a generator of those contents
_HANDLERS: dict[ValueKind, Callable[[MarshalWriter, Any, int], Optional[compound.Children]]] = {
    ValueKind.NIL: MarshalWriter._write_nil,
    ValueKind.BOOL: MarshalWriter._write_bool,
    ValueKind.SMALL_INT: MarshalWriter._write_small_int,
    ValueKind.BIGNUM: MarshalWriter._write_bignum,
    ValueKind.FLOAT: MarshalWriter._write_float,
    ValueKind.SYMBOL: MarshalWriter._write_symbol,
    ValueKind.TEXT: compound.encode_text,
    ValueKind.REGEXP: compound.encode_regexp,
    ValueKind.SEQUENCE: compound.encode_sequence,
    ValueKind.MAP: compound.encode_map,
    ValueKind.RECORD: compound.encode_record,
    ValueKind.CLASS: MarshalWriter._write_class,
    ValueKind.MODULE: MarshalWriter._write_module,
    ValueKind.OBJECT: compound.encode_object,
    ValueKind.OPAQUE: compound.encode_opaque,
    ValueKind.STATE: compound.encode_state,
}
assert set(_HANDLERS) == set(ValueKind), 'every value kind needs a handler'
