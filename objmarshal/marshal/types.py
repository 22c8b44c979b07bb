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

from __future__ import annotations

from enum import Enum, unique
from typing import Any, ClassVar, Final, Protocol, final

# name of the instance attribute that holds the mixins added by `extend_object`
EXTENSIONS_ATTR: Final[str] = '__marshal_extensions__'

# hook names looked up on the type of a value
OPAQUE_HOOK: Final[str] = '__marshal_dump__'
STATE_HOOK: Final[str] = '__marshal_state__'

# class attribute that overrides the name written for a class
NAME_ATTR: Final[str] = '__marshal_name__'

# slot of `DefaultValueDict` holding its default, written as the map default and never as an attribute
DEFAULT_ATTR: Final[str] = '__marshal_default__'


@final
class Symbol:
    """Interned atom, two symbols with the same name are always the same object.

    >>> Symbol('foo') is Symbol('foo')
    True
    >>> Symbol('foo')
    Symbol('foo')
    """
    __slots__ = ('name',)

    name: str

    _interned: ClassVar[dict[str, Symbol]] = {}

    def __new__(cls, name: str) -> Symbol:
        if not isinstance(name, str):
            raise TypeError(f'symbol name must be a str, got {type(name).__name__}')
        symbol = cls._interned.get(name)
        if symbol is None:
            symbol = super().__new__(cls)
            object.__setattr__(symbol, 'name', name)
            symbol = cls._interned.setdefault(name, symbol)
        return symbol

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError('symbols are immutable')

    def __reduce__(self) -> tuple[type[Symbol], tuple[str]]:
        return Symbol, (self.name,)

    def __repr__(self) -> str:
        return f'Symbol({self.name!r})'

    def __str__(self) -> str:
        return self.name


class DefaultValueDict(dict):
    """A dict that answers missing keys with a fixed default value.

    A default of `None` means there is no default, such a mapping is written exactly like a plain dict.

    >>> d = DefaultValueDict(0, a=1)
    >>> d['a'], d['b']
    (1, 0)
    """
    __slots__ = (DEFAULT_ATTR,)

    def __init__(self, default: Any = None, /, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.default = default

    @property
    def default(self) -> Any:
        return getattr(self, DEFAULT_ATTR)

    @default.setter
    def default(self, value: Any) -> None:
        setattr(self, DEFAULT_ATTR, value)

    def __missing__(self, key: Any) -> Any:
        return self.default

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.default!r}, {dict.__repr__(self)})'


@unique
class HookKind(Enum):
    OPAQUE = 'opaque'
    STATE = 'state'


class OpaqueEncodable(Protocol):
    def __marshal_dump__(self, depth: int) -> bytes:
        """Return the raw bytes that stand for this object."""
        ...


class StateCapturable(Protocol):
    def __marshal_state__(self) -> Any:
        """Return a substitute value that is encoded in place of this object."""
        ...


def extend_object(obj: Any, *mixins: type | str) -> None:
    """Attach mixins to a single instance, they are written as its extension chain.

    The chain is kept innermost first, so mixins added by a later call come before the ones added earlier. Mixins can
    be given as classes or directly by name. Only instances with a `__dict__` can be extended.
    """
    try:
        instance_dict = vars(obj)
    except TypeError:
        raise TypeError(f'cannot extend instance of {type(obj).__name__}') from None
    current = instance_dict.get(EXTENSIONS_ATTR, [])
    instance_dict[EXTENSIONS_ATTR] = [*(m for m in mixins if m not in current), *current]
