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
Reference tables remember every value already written during one encode, so that repeated values can be replaced by a
back-reference to the index they got when first seen.

There are two independent tables:

- `SymbolTable` for symbols, keyed by the symbol name
- `ObjectTable` for every other linkable value, keyed by object identity

Indices are assigned in first-seen order starting at 0 on both tables. The root value of an encode is the first thing
registered in the object table, so any other linkable value gets an index of 1 or higher.

>>> tables = ReferenceTables()
>>> shared = ['x']
>>> tables.objects.lookup_or_register(shared) is None  # first time, registered as 0
True
>>> tables.objects.lookup_or_register(shared)
BackReference(index=0)
>>> tables.objects.lookup_or_register(['x']) is None  # equal but not the same object
True
>>> tables.symbols.lookup_or_register(Symbol('x')) is None
True
>>> tables.symbols.lookup_or_register(Symbol('x'))
BackReference(index=0)
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Hashable, NamedTuple, Optional, TypeVar

from objmarshal.consts import SMALL_INT_MAX, SMALL_INT_MIN
from objmarshal.marshal.types import Symbol

T = TypeVar('T')


class BackReference(NamedTuple):
    index: int


def is_small_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and SMALL_INT_MIN <= value <= SMALL_INT_MAX


def is_linkable(value: Any) -> bool:
    """Whether a value takes a slot in the object table, symbols have a table of their own.

    >>> [is_linkable(v) for v in (None, True, 7, 2**40, Symbol('a'), 'a')]
    [False, False, False, True, False, True]
    """
    if value is None or isinstance(value, (bool, Symbol)):
        return False
    return not is_small_int(value)


class ReferenceTable(ABC, Generic[T]):
    def __init__(self) -> None:
        self._entries: dict[Hashable, tuple[int, T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @abstractmethod
    def _key(self, value: T) -> Hashable:
        raise NotImplementedError

    def lookup_or_register(self, value: T) -> Optional[BackReference]:
        """Return a back-reference if `value` was seen before, otherwise register it and return None.

        A None result means the caller must write the value in full.
        """
        key = self._key(value)
        entry = self._entries.get(key)
        if entry is not None:
            return BackReference(entry[0])
        # the value is kept alongside its index, so its id() cannot be reused while the table is alive
        self._entries[key] = (len(self._entries), value)
        return None


class SymbolTable(ReferenceTable[Symbol]):
    def _key(self, value: Symbol) -> Hashable:
        return value.name


class ObjectTable(ReferenceTable[Any]):
    def _key(self, value: Any) -> Hashable:
        return id(value)


class ReferenceTables:
    """The pair of tables used by a single encode, never share it between encodes."""

    def __init__(self) -> None:
        self.symbols = SymbolTable()
        self.objects = ObjectTable()
