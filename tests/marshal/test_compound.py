import re
from collections import OrderedDict, defaultdict
from dataclasses import dataclass
from typing import NamedTuple

import pytest

from objmarshal import (
    AnonymousTypeError,
    DefaultValueDict,
    Symbol,
    UnsupportedDefaultGeneratorError,
    WrongHookReturnTypeError,
    dumps,
    extend_object,
)


class Point(NamedTuple):
    x: int
    y: int


class Plain:
    pass


class Mixin:
    pass


class OtherMixin:
    pass


class MyList(list):
    pass


class AttrList(list):
    pass


class Label(str):
    pass


class Named:
    __marshal_name__ = 'Foo::Bar'


class Outer:
    class Inner:
        pass


class Opaque:
    def __init__(self, data=b'raw'):
        self.data = data
        self.depths = []

    def __marshal_dump__(self, depth):
        self.depths.append(depth)
        return self.data


class Stateful:
    def __init__(self, state):
        self.state = state

    def __marshal_state__(self):
        return self.state


class AttrDict(dict):
    pass


class TaggedBytes(bytes):
    pass


class TaggedBlob:
    def __marshal_dump__(self, depth):
        blob = TaggedBytes(b'raw')
        blob.enc = Symbol('x')
        return blob


@dataclass(slots=True)
class Slotted:
    a: int
    b: str


class SlottedBase:
    __slots__ = ('x',)


class SlottedChild(SlottedBase):
    __slots__ = ('y', '__dict__')


class BothHooks:
    def __marshal_dump__(self, depth):
        return b'x'

    def __marshal_state__(self):
        return None


def test_text_with_attributes():
    label = Label('hi')
    label.color = Symbol('red')
    assert dumps(label) == b'\x04\x08IC:\x0aLabel"\x07hi\x06:\x0b@color:\x08red'


def test_text_subclass_without_attributes():
    assert dumps(Label('hi')) == b'\x04\x08C:\x0aLabel"\x07hi'


def test_regexp():
    assert dumps(re.compile('ab+', re.I)) == b'\x04\x08/\x08ab+\x01'
    assert dumps(re.compile('a', re.X | re.S)) == b'\x04\x08/\x06a\x06'
    assert dumps(re.compile('a', re.M)) == b'\x04\x08/\x06a\x00'


def test_bytes_regexp():
    assert dumps(re.compile(b'a.c')) == b'\x04\x08/\x08a.c\x00'


def test_sequence_subclass():
    assert dumps(MyList([1])) == b'\x04\x08C:\x0bMyList[\x06i\x06'


def test_sequence_with_attributes():
    value = AttrList([1])
    value.tag = 1
    assert dumps(value) == b'\x04\x08IC:\x0dAttrList[\x06i\x06\x06:\x09@tagi\x06'


def test_map():
    assert dumps({}) == b'\x04\x08{\x00'
    assert dumps({Symbol('a'): 1}) == b'\x04\x08{\x06:\x06ai\x06'


def test_map_keeps_insertion_order():
    assert dumps({2: 0, 1: 0}) == b'\x04\x08{\x07i\x07i\x00i\x06i\x00'


def test_map_with_default():
    value = DefaultValueDict(7, {Symbol('a'): 1})
    assert dumps(value) == b'\x04\x08}\x06:\x06ai\x06i\x0c'


def test_map_with_none_default_is_plain():
    assert dumps(DefaultValueDict(None, {Symbol('a'): 1})) == dumps({Symbol('a'): 1})


def test_map_subclass():
    assert dumps(OrderedDict()) == b'\x04\x08C:\x10OrderedDict{\x00'


def test_map_with_default_factory_is_rejected():
    with pytest.raises(UnsupportedDefaultGeneratorError, match='default proc'):
        dumps(defaultdict(list))


def test_record():
    assert dumps(Point(1, 2)) == b'\x04\x08S:\x0aPoint\x07:\x06xi\x06:\x06yi\x07'


def test_records_share_symbols():
    assert dumps([Point(1, 2), Point(3, 4)]) == (
        b'\x04\x08[\x07'
        b'S:\x0aPoint\x07:\x06xi\x06:\x06yi\x07'
        b'S;\x00\x07;\x06i\x08;\x07i\x09'
    )


def test_object():
    obj = Plain()
    obj.a = 1
    assert dumps(obj) == b'\x04\x08o:\x0aPlain\x06:\x07@ai\x06'


def test_object_without_attributes_still_writes_count():
    assert dumps(Plain()) == b'\x04\x08o:\x0aPlain\x00'


def test_objects_share_class_symbol():
    assert dumps([Plain(), Plain()]) == b'\x04\x08[\x07o:\x0aPlain\x00o;\x00\x00'


def test_extended_object():
    obj = Plain()
    extend_object(obj, Mixin)
    assert dumps(obj) == b'\x04\x08e:\x0aMixino:\x0aPlain\x00'


def test_extension_chain_order():
    obj = Plain()
    extend_object(obj, Mixin)
    extend_object(obj, OtherMixin)
    assert dumps(obj) == b'\x04\x08e:\x0fOtherMixine:\x0aMixino:\x0aPlain\x00'


def test_extension_by_name():
    obj = Plain()
    extend_object(obj, 'Some::Module')
    assert dumps(obj) == b'\x04\x08e:\x11Some::Moduleo:\x0aPlain\x00'


def test_extend_object_without_dict():
    with pytest.raises(TypeError):
        extend_object(1, Mixin)


def test_custom_class_name():
    assert dumps(Named()) == b'\x04\x08o:\x0dFoo::Bar\x00'
    assert dumps(Named) == b'\x04\x08c\x0dFoo::Bar'


def test_nested_class_name():
    assert dumps(Outer.Inner) == b'\x04\x08c\x11Outer::Inner'
    assert dumps(Outer.Inner()) == b'\x04\x08o:\x11Outer::Inner\x00'


def test_anonymous_class():
    class Local:
        pass

    with pytest.raises(AnonymousTypeError, match='anonymous class'):
        dumps(Local)
    with pytest.raises(AnonymousTypeError):
        dumps(Local())


def test_opaque_hook():
    assert dumps(Opaque()) == b'\x04\x08u:\x0bOpaque\x08raw'


def test_opaque_hook_receives_depth():
    unlimited = Opaque()
    dumps(unlimited)
    assert unlimited.depths == [-1]

    nested = Opaque()
    dumps([nested], 3)
    assert nested.depths == [2]


def test_opaque_hook_attributes_do_not_leak():
    # the instance attributes are not written, only the returned bytes
    obj = Opaque(b'')
    assert dumps(obj) == b'\x04\x08u:\x0bOpaque\x00'


def test_opaque_hook_wrong_return_type():
    with pytest.raises(WrongHookReturnTypeError):
        dumps(Opaque('not bytes'))


def test_state_hook():
    assert dumps(Stateful([1, 2])) == b'\x04\x08U:\x0dStateful[\x07i\x06i\x07'


def test_state_hook_substitute_takes_a_slot():
    state = [1]
    assert dumps([Stateful(state), state]) == b'\x04\x08[\x07U:\x0dStateful[\x06i\x06@\x07'


def test_opaque_hook_wins_over_state_hook():
    assert dumps(BothHooks()) == b'\x04\x08u:\x0eBothHooks\x06x'


def test_hooks_on_instances_are_ignored():
    obj = Plain()
    vars(obj)['__marshal_state__'] = None
    assert dumps(obj).startswith(b'\x04\x08o:\x0aPlain\x06')


def test_hooks_apply_to_nested_values():
    assert dumps({Symbol('k'): Opaque()}) == b'\x04\x08{\x06:\x06ku:\x0bOpaque\x08raw'


def test_shadowing_instance_attribute_does_not_replace_opaque_hook():
    obj = Opaque()
    obj.__marshal_dump__ = None
    assert dumps(obj) == b'\x04\x08u:\x0bOpaque\x08raw'


def test_shadowing_instance_attribute_does_not_replace_state_hook():
    obj = Stateful([1])
    obj.__marshal_state__ = None
    assert dumps(obj) == b'\x04\x08U:\x0dStateful[\x06i\x06'


def test_opaque_hook_blob_with_attributes():
    assert dumps(TaggedBlob()) == b'\x04\x08Iu:\x0fTaggedBlob\x08raw\x06:\x09@enc:\x06x'


def test_sequence_with_all_wrappers():
    value = AttrList([1])
    value.tag = 1
    extend_object(value, Mixin)
    assert dumps(value) == b'\x04\x08Ie:\x0aMixinC:\x0dAttrList[\x06i\x06\x06:\x09@tagi\x06'


def test_map_with_all_wrappers():
    value = AttrDict()
    value.tag = 1
    extend_object(value, Mixin)
    assert dumps(value) == b'\x04\x08Ie:\x0aMixinC:\x0dAttrDict{\x00\x06:\x09@tagi\x06'


def test_text_with_all_wrappers():
    label = Label('hi')
    label.color = Symbol('red')
    extend_object(label, Mixin)
    assert dumps(label) == b'\x04\x08Ie:\x0aMixinC:\x0aLabel"\x07hi\x06:\x0b@color:\x08red'


def test_slotted_dataclass():
    assert dumps(Slotted(1, 'z')) == b'\x04\x08o:\x0cSlotted\x07:\x07@ai\x06:\x07@b"\x06z'


def test_slots_then_instance_dict():
    obj = SlottedChild()
    obj.x = 1
    obj.z = 3
    # y is never assigned and is left out
    assert dumps(obj) == b'\x04\x08o:\x11SlottedChild\x07:\x07@xi\x06:\x07@zi\x08'


def test_map_default_is_not_an_attribute():
    assert dumps(DefaultValueDict(0)) == b'\x04\x08}\x00i\x00'
