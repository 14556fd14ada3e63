import math
from typing import Iterator

from typeables.errors import InvalidTypeableError
from typeables.schema import ASCII_PATTERN, Schema
from typeables.shrink import shrink_list
from typeables.typeable import RandomSource, Typeable, uniform_int
from typeables.unicode import decode_code_point, random_scalar, split_code_points

# Probability that a character of a non-ASCII text is still drawn from ASCII.
ASCII_CHAR_PROBABILITY = 0.75

# Decimal precisions tried when shrinking a float, from 1 down to 1e-11.
FLOAT_SHRINK_PRECISIONS = 12


def _round_half_up(x: float) -> float:
    return math.floor(x + 0.5)


def boolean() -> Typeable[bool]:
    """Create a typeable for boolean flags."""

    def generate(size: int, rng: RandomSource) -> bool:
        return rng.random() < 0.5

    def shrink(value: bool) -> list[bool]:
        return [False] if value else []

    return Typeable(generate, shrink, Schema(type=("boolean",)))


def number(
    minimum: float | None = None,
    maximum: float | None = None,
    integer: bool = False,
) -> Typeable[float]:
    """Create a typeable for numbers.

    Bounds that are absent or not finite leave that side open; the size then
    decides how far generation reaches. For integers the bounds are rounded
    inward, so an integer between -5.5 and 6.5 is an integer between -5 and 6.

    Raises:
        InvalidTypeableError: if the (rounded) minimum is not below the maximum.
    """
    lo_bound: float | None = None
    hi_bound: float | None = None
    if minimum is not None and math.isfinite(minimum):
        lo_bound = math.ceil(minimum) if integer else minimum
    if maximum is not None and math.isfinite(maximum):
        hi_bound = math.floor(maximum) if integer else maximum
    if lo_bound is not None and hi_bound is not None and lo_bound >= hi_bound:
        raise InvalidTypeableError(
            "tried to create an invalid typeables.number from "
            f"minimum={minimum!r}, maximum={maximum!r}, integer={integer!r}"
        )

    def in_bounds(x: float) -> bool:
        return (lo_bound is None or x >= lo_bound) and (
            hi_bound is None or x <= hi_bound
        )

    def bounds(size: int) -> tuple[float, float]:
        if lo_bound is None:
            if hi_bound is None:
                return (-size, size)
            return (hi_bound - 2 * size, hi_bound)
        if hi_bound is None:
            return (lo_bound, lo_bound + 2 * size)
        return (lo_bound, hi_bound)

    def generate(size: int, rng: RandomSource) -> float:
        lo, hi = bounds(size)
        if integer:
            return uniform_int(rng, int(lo), int(hi))
        return min(float(hi), lo + (hi - lo) * rng.random())

    def shrink_integer(value: float) -> Iterator[float]:
        n = int(value)
        if n < 0 and in_bounds(-n):
            yield -n
        # Candidates are n - n / 2**k rounded half up, in exact integer
        # arithmetic, approaching n as k grows.
        k = 0
        candidate = 0
        while abs(candidate) < abs(n):
            if in_bounds(candidate):
                yield candidate
            k += 1
            candidate = (n * (2**k - 1) * 2 + 2**k) // 2 ** (k + 1)

    def shrink_float(value: float) -> Iterator[float]:
        for i in range(FLOAT_SHRINK_PRECISIONS):
            p = 10**i
            scaled = p * value
            if not math.isfinite(scaled):
                break
            candidate = _round_half_up(scaled) / p
            if in_bounds(candidate) and abs(candidate) < abs(value):
                yield candidate

    finite_min = minimum if minimum is not None and math.isfinite(minimum) else None
    finite_max = maximum if maximum is not None and math.isfinite(maximum) else None
    return Typeable(
        generate,
        shrink_integer if integer else shrink_float,
        Schema(
            type=("integer" if integer else "number",),
            minimum=finite_min,
            maximum=finite_max,
        ),
    )


def _scalar(c: str) -> int:
    # Lone surrogates survive split_code_points; rank them by their own unit.
    if len(c) == 1:
        return ord(c)
    return decode_code_point(c)


def _char_rank(c: str) -> int:
    """Order characters so that simpler ones sort first.

    Lowercase letters rank below uppercase, then digits, then the space,
    then other whitespace, then everything else; ties are broken by the
    code point. The flags take the bits above the 21 needed for a code point.
    """
    n = _scalar(c)
    ch = chr(n)
    flags = (
        (0 if ch.islower() else 0x10)
        + (0 if ch.isupper() else 8)
        + (0 if "0" <= ch <= "9" else 4)
        + (0 if ch == " " else 2)
        + (0 if ch.isspace() else 1)
    )
    return (flags << 21) + n


_CHAR_SHRINK_CANDIDATES = [(_char_rank(c), c) for c in "abcABC123 \n"]


def _shrink_char(c: str) -> Iterator[str]:
    rank = _char_rank(c)
    candidates = list(_CHAR_SHRINK_CANDIDATES)
    ch = chr(_scalar(c))
    lowered = ch.lower()
    # Some characters lowercase to more than one code point; skip those.
    if len(lowered) == 1 and lowered != ch:
        candidates.append((_char_rank(lowered), lowered))
    candidates.sort(key=lambda x: x[0])
    previous: int | None = None
    for candidate_rank, candidate in candidates:
        if candidate_rank < rank and candidate_rank != previous:
            yield candidate
        previous = candidate_rank


def text(
    min_length: int = 0,
    max_length: int | None = None,
    ascii: bool = False,
) -> Typeable[str]:
    """Create a typeable for strings.

    Args:
        min_length: the JSON schema ``minLength``.
        max_length: the JSON schema ``maxLength``, unbounded when ``None``.
        ascii: restrict characters to ASCII; otherwise roughly a quarter of the
            characters are drawn from all of Unicode.

    Lengths count code points. Schema patterns are not supported because
    there is no engine here to generate strings from a regex.

    Raises:
        InvalidTypeableError: if ``max_length < min_length``.
    """
    if min_length < 0:
        raise InvalidTypeableError(
            f"Tried to create a typeables.text with negative min_length {min_length}"
        )
    if max_length is not None and max_length < min_length:
        raise InvalidTypeableError(
            "Tried to create a typeables.text with max_length < min_length"
        )

    def generate(size: int, rng: RandomSource) -> str:
        # size caps the length unless that would go below min_length.
        longest = size if max_length is None else min(size, max_length)
        longest = max(min_length, longest)
        length = uniform_int(rng, min_length, longest)
        chars: list[str] = []
        for _ in range(length):
            if ascii or rng.random() < ASCII_CHAR_PROBABILITY:
                chars.append(chr(int(128 * rng.random())))
            else:
                chars.append(chr(random_scalar(rng)))
        return "".join(chars)

    def shrink(value: str) -> Iterator[str]:
        for option in shrink_list(split_code_points(value), _shrink_char):
            if len(option) >= min_length:
                yield "".join(option)

    return Typeable(
        generate,
        shrink,
        Schema(
            type=("string",),
            minLength=min_length or None,
            maxLength=max_length,
            pattern=ASCII_PATTERN if ascii else None,
        ),
    )
