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
The encoder never inspects objects directly, everything it needs to know about them goes through an `ObjectModel`.

`PythonObjectModel` is the default and maps plain Python objects:

- attributes are the set `__slots__` along the class hierarchy followed by the entries of the instance `__dict__`,
  written as `@name`
- class names are the `__qualname__` with `.` rendered as `::`, unless the class sets `__marshal_name__`
- classes defined inside a function (`<locals>` in the qualname) are anonymous and cannot be written
- the extension chain is whatever `extend_object` attached to the instance
- custom hooks are looked up on the type, never on the instance
"""

from abc import ABC, abstractmethod
from types import ModuleType
from typing import Any, Iterator, Optional

from objmarshal.exceptions import AnonymousTypeError, UnsupportedDefaultGeneratorError
from objmarshal.marshal.types import (
    DEFAULT_ATTR,
    EXTENSIONS_ATTR,
    NAME_ATTR,
    OPAQUE_HOOK,
    STATE_HOOK,
    DefaultValueDict,
    HookKind,
    Symbol,
)

ATTRIBUTE_PREFIX = '@'
NAMESPACE_SEPARATOR = '::'

# entries of `__slots__` that are not attributes
SLOT_SPECIALS = frozenset({'__dict__', '__weakref__'})

# names used by this library to store its own data on instances
RESERVED_ATTRS = frozenset({EXTENSIONS_ATTR, DEFAULT_ATTR})


def _mangle(cls: type, name: str) -> str:
    """Name under which a private slot is stored, `__x` declared in `Foo` becomes `_Foo__x`."""
    if name.startswith('__') and not name.endswith('__'):
        return f'_{cls.__name__.lstrip("_")}{name}'
    return name


class ObjectModel(ABC):
    """Capabilities the encoder needs from the object model it is encoding."""

    @abstractmethod
    def enumerate_attributes(self, obj: Any) -> list[tuple[Symbol, Any]]:
        """Return the attributes attached to `obj`, in the order they should be written."""
        raise NotImplementedError

    @abstractmethod
    def resolve_class_name(self, obj: Any) -> str:
        """Return the name of the class of `obj`, or of `obj` itself when it is a class.

        Raises `AnonymousTypeError` if the class has no usable name.
        """
        raise NotImplementedError

    @abstractmethod
    def resolve_module_name(self, module: Any) -> str:
        """Return the name of a module, raises `AnonymousTypeError` if it has none."""
        raise NotImplementedError

    @abstractmethod
    def walk_extension_chain(self, obj: Any) -> list[str]:
        """Return the names of the mixins attached to `obj` alone, innermost first."""
        raise NotImplementedError

    @abstractmethod
    def detect_custom_hook(self, obj: Any) -> Optional[HookKind]:
        """Return which custom hook `obj` exposes, if any, opaque hooks take priority."""
        raise NotImplementedError

    @abstractmethod
    def get_map_default(self, mapping: Any) -> Any:
        """Return the plain default of a mapping, or None when it has none.

        Raises `UnsupportedDefaultGeneratorError` if missing values are produced by a callable.
        """
        raise NotImplementedError


class PythonObjectModel(ObjectModel):
    def enumerate_attributes(self, obj: Any) -> list[tuple[Symbol, Any]]:
        if isinstance(obj, (type, ModuleType)):
            return []
        attributes = [
            (Symbol(ATTRIBUTE_PREFIX + name), value)
            for name, value in self._iter_slots(obj)
        ]
        instance_dict = getattr(obj, '__dict__', None)
        if instance_dict:
            attributes.extend(
                (Symbol(ATTRIBUTE_PREFIX + name), value)
                for name, value in instance_dict.items()
                if name not in RESERVED_ATTRS
            )
        return attributes

    def _iter_slots(self, obj: Any) -> Iterator[tuple[str, Any]]:
        """Yield the set slots of `obj`, base classes first and each class in declaration order."""
        for cls in reversed(type(obj).__mro__):
            slots = vars(cls).get('__slots__', ())
            if isinstance(slots, str):
                slots = (slots,)
            for name in slots:
                if name in SLOT_SPECIALS or name in RESERVED_ATTRS:
                    continue
                member = vars(cls).get(_mangle(cls, name))
                if member is None:
                    continue
                try:
                    value = member.__get__(obj, cls)
                except AttributeError:
                    # slot never assigned
                    continue
                yield name, value

    def resolve_class_name(self, obj: Any) -> str:
        cls = obj if isinstance(obj, type) else type(obj)
        name = cls.__dict__.get(NAME_ATTR)
        if name is not None:
            if not isinstance(name, str) or not name:
                raise AnonymousTypeError(f"can't dump class with invalid name {name!r}")
            return name
        qualname = getattr(cls, '__qualname__', '')
        if not qualname or '<' in qualname:
            raise AnonymousTypeError(f"can't dump anonymous class {cls!r}")
        return qualname.replace('.', NAMESPACE_SEPARATOR)

    def resolve_module_name(self, module: Any) -> str:
        name = getattr(module, '__name__', None)
        if not isinstance(name, str) or not name:
            raise AnonymousTypeError(f"can't dump anonymous module {module!r}")
        return name.replace('.', NAMESPACE_SEPARATOR)

    def walk_extension_chain(self, obj: Any) -> list[str]:
        instance_dict = getattr(obj, '__dict__', None)
        if not instance_dict or isinstance(obj, (type, ModuleType)):
            return []
        return [self._mixin_name(mixin) for mixin in instance_dict.get(EXTENSIONS_ATTR, ())]

    def _mixin_name(self, mixin: Any) -> str:
        if isinstance(mixin, str):
            return mixin
        if isinstance(mixin, ModuleType):
            return self.resolve_module_name(mixin)
        return self.resolve_class_name(mixin)

    def detect_custom_hook(self, obj: Any) -> Optional[HookKind]:
        if isinstance(obj, type):
            return None
        cls = type(obj)
        if callable(getattr(cls, OPAQUE_HOOK, None)):
            return HookKind.OPAQUE
        if callable(getattr(cls, STATE_HOOK, None)):
            return HookKind.STATE
        return None

    def get_map_default(self, mapping: Any) -> Any:
        if callable(getattr(mapping, 'default_factory', None)):
            raise UnsupportedDefaultGeneratorError("can't dump hash with default proc")
        if isinstance(mapping, DefaultValueDict):
            return mapping.default
        return None
