import re

from typeables.errors import CodePointDecodeError
from typeables.typeable import RandomSource

SURROGATE_LO = 0xD800
SURROGATE_HI = 0xE000
HIGH_SURROGATE_BASE = 0xD800
LOW_SURROGATE_BASE = 0xDC00

# 17 planes of 65536 code points each.
MAX_SCALAR = 17 * 0x10000

# Split between characters, except directly after the high half of a pair.
_CODE_POINT_BOUNDARY = re.compile(r"[\ud800-\udbff][\udc00-\udfff]|.", re.DOTALL)


def _is_surrogate(unit: int) -> bool:
    return SURROGATE_LO <= unit < SURROGATE_HI


def random_scalar(rng: RandomSource) -> int:
    """Draw a Unicode scalar value uniformly, skipping the surrogate range."""
    while True:
        n = int(rng.random() * MAX_SCALAR)
        if not _is_surrogate(n):
            return n


def encode_code_point(n: int) -> str:
    """Encode a scalar value as one UTF-16 unit, or as a surrogate pair."""
    if n < 0 or n >= MAX_SCALAR or _is_surrogate(n):
        raise ValueError(f"{n:#x} is not a Unicode scalar value")
    if n < 0x10000:
        return chr(n)
    base = n - 0x10000
    return chr((base >> 10) + HIGH_SURROGATE_BASE) + chr(
        (base & 0x3FF) + LOW_SURROGATE_BASE
    )


def random_code_point(rng: RandomSource) -> str:
    return encode_code_point(random_scalar(rng))


def decode_code_point(s: str) -> int:
    """Inverse of encode_code_point.

    A single character decodes to its own ordinal, so characters outside the
    basic multilingual plane are accepted both as one Python character and as
    a two-unit surrogate pair.

    Raises:
        CodePointDecodeError: if ``s`` is not exactly one code point.
    """
    if len(s) == 0:
        raise CodePointDecodeError(s, "called on an empty string")
    if len(s) == 1:
        c = ord(s)
        if _is_surrogate(c):
            raise CodePointDecodeError(
                s, "called on only one half of a surrogate pair"
            )
        return c
    if len(s) == 2:
        hi = ord(s[0]) - HIGH_SURROGATE_BASE
        lo = ord(s[1]) - LOW_SURROGATE_BASE
        if hi < 0 or hi >= 0x400:
            raise CodePointDecodeError(
                s, "first char is not a high half of a surrogate pair"
            )
        if lo < 0 or lo >= 0x400:
            raise CodePointDecodeError(
                s, "second char is not a low half of a surrogate pair"
            )
        return 0x10000 + (hi << 10) + lo
    raise CodePointDecodeError(
        s, "string is too long to be just one unicode code point"
    )


def split_code_points(s: str) -> list[str]:
    """Split a string into code points without separating surrogate pairs."""
    return _CODE_POINT_BOUNDARY.findall(s)
