from typing import Callable, Iterable, Iterator, Sequence, TypeVar

T = TypeVar("T")


def shrink_list(
    items: Sequence[T], shrinker: Callable[[T], Iterable[T]]
) -> Iterator[list[T]]:
    """Yield simpler versions of a sequence, after QuickCheck's shrinkList.

    Contiguous chunks are removed first: one empty list, then two lists of
    half the length, then four lists of three quarters of the length and so
    on, until single elements have each been dropped once. That is a little
    over ``2 * len(items)`` candidates. Only then is each element shrunk in
    place with ``shrinker``.

    The result is finite as long as ``shrinker`` is.
    """
    n = len(items)
    k = n
    while k > 0:
        for i in range(0, n - k + 1, k):
            yield [*items[:i], *items[i + k :]]
        k >>= 1

    for i, item in enumerate(items):
        for candidate in shrinker(item):
            out = list(items)
            out[i] = candidate
            yield out
