from objmarshal import Symbol, dumps
from objmarshal.marshal.reference_tables import BackReference, ObjectTable, ReferenceTables, SymbolTable, is_linkable


class Node:
    def __init__(self, value=None):
        self.value = value
        self.next = None


def _fresh_text(text: str) -> str:
    # build a new str object, literals with the same content may be shared by the compiler
    return ''.join(list(text))


def test_indices_in_first_seen_order():
    table = ObjectTable()
    values = [[], [], [], []]
    assert all(table.lookup_or_register(v) is None for v in values)
    assert [table.lookup_or_register(v) for v in values] == [BackReference(i) for i in range(4)]
    assert len(table) == 4


def test_object_table_uses_identity():
    table = ObjectTable()
    a = [1]
    b = [1]
    assert a == b
    assert table.lookup_or_register(a) is None
    assert table.lookup_or_register(b) is None
    assert table.lookup_or_register(a) == BackReference(0)
    assert table.lookup_or_register(b) == BackReference(1)


def test_object_table_keeps_values_alive():
    table = ObjectTable()
    for _ in range(100):
        # each list is only referenced by the table, its id must not be handed to the next one
        assert table.lookup_or_register([]) is None
    assert len(table) == 100


def test_symbol_table_uses_name():
    table = SymbolTable()
    assert table.lookup_or_register(Symbol('a')) is None
    assert table.lookup_or_register(Symbol('b')) is None
    assert table.lookup_or_register(Symbol('a')) == BackReference(0)
    assert table.lookup_or_register(Symbol('b')) == BackReference(1)


def test_tables_are_independent():
    tables = ReferenceTables()
    assert tables.symbols.lookup_or_register(Symbol('x')) is None
    assert tables.objects.lookup_or_register('x') is None
    assert tables.symbols.lookup_or_register(Symbol('x')) == BackReference(0)
    assert tables.objects.lookup_or_register('x') == BackReference(0)


def test_is_linkable():
    assert not is_linkable(None)
    assert not is_linkable(True)
    assert not is_linkable(False)
    assert not is_linkable(2**30 - 1)
    assert not is_linkable(Symbol('a'))
    assert is_linkable(2**30)
    assert is_linkable(1.5)
    assert is_linkable('a')
    assert is_linkable([])


def test_repeated_text_is_a_back_reference():
    s = _fresh_text('ab')
    assert dumps([s, s]) == b'\x04\x08[\x07"\x07ab@\x06'


def test_equal_but_distinct_text_is_written_twice():
    a = _fresh_text('ab')
    b = _fresh_text('ab')
    assert a is not b
    assert dumps([a, b]) == b'\x04\x08[\x07"\x07ab"\x07ab'


def test_back_reference_is_shorter():
    s = _fresh_text('some text')
    fresh = len(dumps(s)) - 2
    repeated = len(dumps([s, s])) - len(dumps([s]))
    assert repeated < fresh


def test_repeated_symbols():
    assert dumps([Symbol('a'), Symbol('a'), Symbol('b'), Symbol('b')]) == b'\x04\x08[\x09:\x06a;\x00:\x06b;\x06'


def test_symbol_and_object_slots_do_not_collide():
    s = _fresh_text('y')
    data = dumps([Symbol('x'), s, Symbol('x'), s])
    assert data == b'\x04\x08[\x09:\x06x"\x06y;\x00@\x06'


def test_small_values_never_take_slots():
    s = _fresh_text('s')
    # 7, None and True do not move the index of s away from 1
    assert dumps([7, None, True, s, 7, s]) == b'\x04\x08[\x0bi\x0c0T"\x06si\x0c@\x06'


def test_shared_bignum_and_float():
    big = 2**64
    f = float('2.5')
    data = dumps([big, f, big, f])
    assert data == (
        b'\x04\x08[\x09'
        b'l+\x0a\x00\x00\x00\x00\x00\x00\x00\x00\x01\x00'
        b'f\x082.5'
        b'@\x06@\x07'
    )


def test_cycle_through_sequence():
    a = []
    a.append(a)
    assert dumps(a) == b'\x04\x08[\x06@\x00'


def test_cycle_through_object():
    node = Node()
    node.next = node
    assert dumps(node) == b'\x04\x08o:\x09Node\x07:\x0b@value0:\x0a@next@\x00'


def test_shared_object_in_two_places():
    shared = Node(1)
    first = Node(shared)
    second = Node(shared)
    data = dumps([first, second])
    # first is 1, shared is 2, second is 3
    assert data == (
        b'\x04\x08[\x07'
        b'o:\x09Node\x07:\x0b@valueo;\x00\x07;\x01i\x06:\x0a@next0;\x020'
        b'o;\x00\x07;\x01@\x07;\x020'
    )
