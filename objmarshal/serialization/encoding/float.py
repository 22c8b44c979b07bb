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
This module implements the portable float encoding: the value is written as length-prefixed text.

Non-finite values and zeros use fixed literals:

- NaN is `nan`
- positive and negative zero are `0` and `-0`
- positive and negative infinity are `inf` and `-inf`

Any other value is written with 17 significant digits (`'%.17g'`) followed by a binary mantissa suffix. The suffix is
what makes the encoding bit-exact: the mantissa of `|value|` is scaled by 2**37, the integral part is dropped (a
decoder recovers it from the decimal text) and the remaining fraction is written 32 bits at a time, big-endian, after a
single `00` marker byte. Trailing zero bytes are removed.

>>> se = Serializer.build_bytes_serializer()
>>> encode_float(se, float('nan'))
>>> encode_float(se, 0.0)
>>> encode_float(se, -0.0)
>>> encode_float(se, float('inf'))
>>> encode_float(se, float('-inf'))
>>> bytes(se.finalize())
b'\x08nan\x060\x07-0\x08inf\t-inf'

Values that fit in 37 bits of mantissa have no suffix:

>>> se = Serializer.build_bytes_serializer()
>>> encode_float(se, 1.5)
>>> encode_float(se, -2.25)
>>> bytes(se.finalize())
b'\x081.5\n-2.25'

Others carry it after the decimal digits:

>>> float_to_text(0.1)
b'0.10000000000000001\x00\x99\x9a'
"""

import math

from objmarshal.serialization import Serializer

from .bytes import encode_bytes

DECIMAL_DIGITS = 17
DECIMAL_MANTISSA_BITS = 37
MANTISSA_CHUNK_BITS = 32


def mantissa_suffix(value: float) -> bytes:
    """Binary suffix carrying the mantissa bits that the decimal text may have lost."""
    data = bytearray()
    mantissa, _ = math.frexp(abs(value))
    fraction, _ = math.modf(math.ldexp(mantissa, DECIMAL_MANTISSA_BITS))
    if fraction > 0:
        data.append(0)
    while fraction > 0:
        fraction, chunk = math.modf(math.ldexp(fraction, MANTISSA_CHUNK_BITS))
        data += int(chunk).to_bytes(MANTISSA_CHUNK_BITS // 8, byteorder='big')
    while data and data[-1] == 0:
        del data[-1]
    return bytes(data)


def float_to_text(value: float) -> bytes:
    """Text form of a float, as it appears on the wire without the length prefix."""
    if math.isnan(value):
        return b'nan'
    if value == 0.0:
        return b'-0' if math.copysign(1.0, value) < 0 else b'0'
    if math.isinf(value):
        return b'-inf' if value < 0 else b'inf'
    text = '%.*g' % (DECIMAL_DIGITS, value)
    return text.encode('ascii') + mantissa_suffix(value)


def encode_float(serializer: Serializer, value: float) -> None:
    """ Encode a float as length-prefixed text.

    This module's docstring has more details and examples.
    """
    encode_bytes(serializer, float_to_text(value))
