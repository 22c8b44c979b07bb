import math
import struct

import pytest

from objmarshal.serialization import Serializer
from objmarshal.serialization.encoding.float import encode_float, float_to_text, mantissa_suffix
from tests.utils import read_compact_int, read_float_text


def _bits(value: float) -> bytes:
    return struct.pack('>d', value)


@pytest.mark.parametrize('value, text', [
    (math.nan, b'nan'),
    (0.0, b'0'),
    (-0.0, b'-0'),
    (math.inf, b'inf'),
    (-math.inf, b'-inf'),
])
def test_special_values(value, text):
    assert float_to_text(value) == text


def test_encoded_with_length_prefix():
    se = Serializer.build_bytes_serializer()
    encode_float(se, -math.inf)
    data = bytes(se.finalize())
    size, pos = read_compact_int(data)
    assert size == 4
    assert data[pos:] == b'-inf'


@pytest.mark.parametrize('value', [1.0, 1.5, -2.25, 1024.0, 0.5, -3.0])
def test_exact_values_have_no_suffix(value):
    assert mantissa_suffix(value) == b''
    assert float_to_text(value) == ('%.17g' % value).encode('ascii')


@pytest.mark.parametrize('value', [
    0.1,
    -0.1,
    1 / 3,
    math.pi,
    -math.e,
    1e100,
    -1.2345678901234567e-200,
    5e-324,
    2.2250738585072014e-308,
    1.7976931348623157e308,
    123456.789,
])
def test_bit_exact_round_trip(value):
    text = float_to_text(value)
    assert _bits(read_float_text(text)) == _bits(value)


@pytest.mark.parametrize('value', [0.1, math.pi, 1e100, -1 / 3])
def test_suffix_shape(value):
    suffix = mantissa_suffix(value)
    assert suffix[0] == 0
    assert suffix[-1] != 0
    # a double has 53 bits of mantissa, 37 go in the integral part so at most 16 are left
    assert len(suffix) <= 3


def test_suffix_of_one_tenth():
    assert float_to_text(0.1) == b'0.10000000000000001\x00\x99\x9a'


def test_special_values_round_trip():
    assert math.isnan(read_float_text(float_to_text(math.nan)))
    assert read_float_text(float_to_text(math.inf)) == math.inf
    assert read_float_text(float_to_text(-math.inf)) == -math.inf
