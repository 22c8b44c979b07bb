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

from typing import Final

MAJOR_VERSION: Final[int] = 4
MINOR_VERSION: Final[int] = 8
VERSION_HEADER: Final[bytes] = bytes([MAJOR_VERSION, MINOR_VERSION])

# depth value that disables the nesting limit
UNLIMITED_DEPTH: Final[int] = -1

# integers in this range are written inline and never take a reference slot
SMALL_INT_MIN: Final[int] = -2**30
SMALL_INT_MAX: Final[int] = 2**30 - 1

TYPE_NIL: Final[bytes] = b'0'
TYPE_TRUE: Final[bytes] = b'T'
TYPE_FALSE: Final[bytes] = b'F'
TYPE_FIXNUM: Final[bytes] = b'i'

TYPE_EXTENDED: Final[bytes] = b'e'
TYPE_UCLASS: Final[bytes] = b'C'
TYPE_OBJECT: Final[bytes] = b'o'
TYPE_USERDEF: Final[bytes] = b'u'
TYPE_USRMARSHAL: Final[bytes] = b'U'
TYPE_FLOAT: Final[bytes] = b'f'
TYPE_BIGNUM: Final[bytes] = b'l'
TYPE_STRING: Final[bytes] = b'"'
TYPE_REGEXP: Final[bytes] = b'/'
TYPE_ARRAY: Final[bytes] = b'['
TYPE_HASH: Final[bytes] = b'{'
TYPE_HASH_DEF: Final[bytes] = b'}'
TYPE_STRUCT: Final[bytes] = b'S'
TYPE_CLASS: Final[bytes] = b'c'
TYPE_MODULE: Final[bytes] = b'm'

TYPE_SYMBOL: Final[bytes] = b':'
TYPE_SYMLINK: Final[bytes] = b';'

TYPE_IVAR: Final[bytes] = b'I'
TYPE_LINK: Final[bytes] = b'@'

# regular expression option bits
REGEXP_IGNORECASE: Final[int] = 0x01
REGEXP_EXTENDED: Final[int] = 0x02
REGEXP_MULTILINE: Final[int] = 0x04
