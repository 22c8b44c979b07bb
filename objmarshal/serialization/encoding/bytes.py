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
This modules implements encoding of byte sequence by prefixing it with the length of the sequence encoded as a compact
integer.

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'ab')  # will prepend b'\x07' before writing b'ab'
>>> bytes(se.finalize()).hex()
'076162'

>>> se = Serializer.build_bytes_serializer()
>>> raw_data = b'test' * 32
>>> len(raw_data)
128
>>> encode_bytes(se, raw_data)  # prepends b'\x01\x80' before raw_data
>>> encoded_data = bytes(se.finalize())
>>> len(encoded_data)
130
>>> encoded_data[:10].hex()
'01807465737474657374'

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'')
>>> bytes(se.finalize())
b'\x00'
"""

from objmarshal.serialization import Serializer, TooLongError

from .compact_int import encode_compact_int

# largest length a compact integer can carry without turning negative
MAX_LENGTH = 2**31 - 1


def encode_bytes(serializer: Serializer, data: bytes) -> None:
    """ Encodes a byte-sequence adding a length prefix.

    This modules's docstring has more details and examples.
    """
    assert isinstance(data, (bytes, bytearray, memoryview))
    size = len(data)
    if size > MAX_LENGTH:
        raise TooLongError(f'byte sequence is too long: {size}')
    encode_compact_int(serializer, size)
    serializer.write_bytes(data)
