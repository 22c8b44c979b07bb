"""Reference readers for the scalar payloads, used to check that what the encoder writes reads back exactly."""

import math


def read_compact_int(data: bytes, pos: int = 0) -> tuple[int, int]:
    """Read a compact integer at `pos`, return the value and the position right after it."""
    c = data[pos]
    if c > 127:
        c -= 256
    pos += 1
    if c == 0:
        return 0, pos
    if 4 < c < 128:
        return c - 5, pos
    if -129 < c < -4:
        return c + 5, pos
    if c > 0:
        x = 0
        for i in range(c):
            x |= data[pos + i] << (8 * i)
        return x, pos + c
    c = -c
    x = -1
    for i in range(c):
        x &= ~(0xff << (8 * i))
        x |= data[pos + i] << (8 * i)
    return x, pos + c


def read_bignum(data: bytes, pos: int = 0) -> tuple[int, int]:
    """Read a bignum payload (without the tag) at `pos`."""
    sign = data[pos:pos + 1]
    words, pos = read_compact_int(data, pos + 1)
    size = 2 * words
    magnitude = int.from_bytes(data[pos:pos + size], byteorder='little')
    return (-magnitude if sign == b'-' else magnitude), pos + size


def read_float_text(text: bytes) -> float:
    """Read the text form of a float, including the binary mantissa suffix."""
    if text == b'nan':
        return math.nan
    if text == b'inf':
        return math.inf
    if text == b'-inf':
        return -math.inf
    nul = text.find(b'\x00')
    if nul < 0:
        return float(text.decode('ascii'))
    value = float(text[:nul].decode('ascii'))
    suffix = text[nul + 1:]
    mantissa, exponent = math.frexp(abs(value))
    _, result = math.modf(math.ldexp(mantissa, 37))
    dig = 0
    for i in range(0, len(suffix), 4):
        chunk = suffix[i:i + 4]
        dig -= 8 * len(chunk)
        result += math.ldexp(int.from_bytes(chunk, byteorder='big'), dig)
    result = math.ldexp(result, exponent - 37)
    return -result if value < 0 else result
