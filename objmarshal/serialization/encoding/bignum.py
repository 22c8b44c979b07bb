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
This module implements encoding of arbitrary-precision integers.

Layout: [sign: '+' or '-'][N: compact int][magnitude: 2*N bytes, little-endian]

N counts 16-bit words, so when the magnitude needs an odd number of bytes a trailing zero byte is added.

>>> se = Serializer.build_bytes_serializer()
>>> encode_bignum(se, 2**30)  # 4 bytes, 2 words
>>> bytes(se.finalize()).hex()
'2b0700000040'

>>> se = Serializer.build_bytes_serializer()
>>> encode_bignum(se, 2**32)  # 5 bytes, padded to 6
>>> bytes(se.finalize()).hex()
'2b08000000000100'

>>> se = Serializer.build_bytes_serializer()
>>> encode_bignum(se, -(2**40))
>>> bytes(se.finalize()).hex()
'2d08000000000001'
"""

from objmarshal.serialization import Serializer

from .compact_int import encode_compact_int

SIGN_POSITIVE = b'+'
SIGN_NEGATIVE = b'-'


def encode_bignum(serializer: Serializer, number: int) -> None:
    """ Encode an int of any size using sign and magnitude.

    This module's docstring has more details and examples.
    """
    magnitude = abs(number)
    length = (magnitude.bit_length() + 7) // 8
    if length % 2 == 1:
        length += 1
    serializer.write_bytes(SIGN_NEGATIVE if number < 0 else SIGN_POSITIVE)
    encode_compact_int(serializer, length // 2)
    serializer.write_bytes(magnitude.to_bytes(length, byteorder='little'))
