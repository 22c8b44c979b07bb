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
This module implements the compact integer encoding, used for small integer values and for every length, count and
reference index in the marshal format.

The format has two forms:

- short form, a single byte:
  - `0` is written as `00`
  - `1..122` is written as `n + 5`, so `06..7f`
  - `-123..-1` is written as `256 + (n - 5)`, so `80..fa`
- long form, a count byte followed by 1 to 4 bytes of the two's complement representation in little-endian order; the
  bytes are emitted from the lowest one, stopping as soon as what is left is `0` (positive) or `-1` (negative); the
  count byte is `count` for positive values and `256 - count` for negative values, so `01..04` or `fc..ff`

Values that need more than 4 bytes cannot be represented.

>>> se = Serializer.build_bytes_serializer()
>>> encode_compact_int(se, 0)  # writes 00
>>> encode_compact_int(se, 5)  # writes 0a
>>> encode_compact_int(se, -1)  # writes fa
>>> encode_compact_int(se, 122)  # writes 7f
>>> encode_compact_int(se, 123)  # writes 017b
>>> encode_compact_int(se, -123)  # writes 80
>>> encode_compact_int(se, -124)  # writes ff84
>>> encode_compact_int(se, 256)  # writes 020001
>>> encode_compact_int(se, -256)  # writes ff00
>>> bytes(se.finalize()).hex()
'000afa7f017b80ff84020001ff00'

>>> se = Serializer.build_bytes_serializer()
>>> encode_compact_int(se, 2**30 - 1)
>>> encode_compact_int(se, -2**30)
>>> bytes(se.finalize()).hex()
'04ffffff3ffc000000c0'

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_compact_int(se, 2**32)
... except ValueError as e:
...     print(*e.args)
too big to encode
"""

from objmarshal.serialization import Serializer

MAX_LONG_FORM_BYTES = 4


def encode_compact_int(serializer: Serializer, number: int) -> None:
    """ Encode an int using the compact integer format.

    This module's docstring has more details and examples.
    """
    if number == 0:
        serializer.write_byte(0)
    elif 0 < number < 123:
        serializer.write_byte(number + 5)
    elif -124 < number < 0:
        serializer.write_byte(256 + (number - 5))
    else:
        data = bytearray()
        rest = number
        for _ in range(MAX_LONG_FORM_BYTES):
            data.append(rest & 0xff)
            rest >>= 8
            if rest == 0 or rest == -1:
                break
        else:
            raise ValueError('too big to encode')
        count = len(data)
        serializer.write_byte(256 - count if rest < 0 else count)
        serializer.write_bytes(bytes(data))
