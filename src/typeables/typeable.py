import random
import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Iterator, Protocol, TypeVar

from typeables.schema import Schema

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1). ``random.Random`` fits."""

    def random(self) -> float: ...


class _ThreadLocalRandom(threading.local):
    def __init__(self) -> None:
        self.rng = random.Random()


_local = _ThreadLocalRandom()


def default_random() -> RandomSource:
    """Return the calling thread's own random source."""
    return _local.rng


def seeded(seed: int) -> random.Random:
    return random.Random(seed)


def uniform_int(rng: RandomSource, lo: int, hi: int) -> int:
    """Draw an integer uniformly from the inclusive range [lo, hi]."""
    return lo + int(rng.random() * (hi - lo + 1))


@dataclass(frozen=True)
class Typeable(Generic[T]):
    """A generator, a shrinker and a schema for one type of value.

    Attributes:
        generator: draws a value for a given size from a random source.
        shrinker: yields strictly simpler candidates for a value, never the
            value itself, and always a finite number of them.
        schema: describes every value the generator can produce.
    """

    generator: Callable[[int, RandomSource], T]
    shrinker: Callable[[T], Iterable[T]]
    schema: Schema

    def generate(self, size: int, rng: RandomSource | None = None) -> T:
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        return self.generator(size, rng if rng is not None else default_random())

    def shrink(self, value: T) -> Iterator[T]:
        return iter(self.shrinker(value))

    def json_schema(self) -> dict[str, Any]:
        return self.schema.to_json_schema()
