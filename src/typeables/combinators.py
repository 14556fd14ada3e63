from typing import Any, Iterator, Mapping, TypeVar

from typeables.primitives import text
from typeables.schema import Schema
from typeables.shrink import shrink_list
from typeables.typeable import RandomSource, Typeable, uniform_int

A = TypeVar("A")

# Probability that a nullable typeable generates None.
NULL_PROBABILITY = 0.25


def nullable(typeable: Typeable[A]) -> Typeable[A | None]:
    """Derive a typeable which is like the input but can also be JSON ``null``."""

    def generate(size: int, rng: RandomSource) -> A | None:
        if rng.random() < NULL_PROBABILITY:
            return None
        return typeable.generator(size, rng)

    def shrink(value: A | None) -> Iterator[A | None]:
        if value is not None:
            yield None
            yield from typeable.shrink(value)

    return Typeable(generate, shrink, typeable.schema.with_null())


def list_of(typeable: Typeable[A]) -> Typeable[list[A]]:
    """Derive a typeable for lists of Xs from the typeable for Xs."""

    def generate(size: int, rng: RandomSource) -> list[A]:
        length = uniform_int(rng, 0, size)
        return [typeable.generator(size, rng) for _ in range(length)]

    def shrink(value: list[A]) -> Iterator[list[A]]:
        return shrink_list(value, typeable.shrink)

    return Typeable(
        generate, shrink, Schema(type=("array",), items=typeable.schema)
    )


def record(
    props: Mapping[str, Typeable[Any]] | None = None, /, **kwargs: Typeable[Any]
) -> Typeable[dict[str, Any]]:
    """Derive a typeable for objects with exactly the given properties.

    Properties can be passed as a mapping, as keyword arguments, or both;
    generation and shrinking follow their order.
    """
    fields: dict[str, Typeable[Any]] = {**(props or {}), **kwargs}
    names = list(fields)

    def generate(size: int, rng: RandomSource) -> dict[str, Any]:
        return {name: fields[name].generator(size, rng) for name in names}

    def shrink(value: dict[str, Any]) -> Iterator[dict[str, Any]]:
        # One property at a time, so each candidate differs in one place only.
        for name in names:
            for shrunk in fields[name].shrink(value[name]):
                copy = dict(value)
                copy[name] = shrunk
                yield copy

    return Typeable(
        generate,
        shrink,
        Schema(
            type=("object",),
            properties={name: fields[name].schema for name in names},
            required=tuple(names),
            additionalProperties=False,
        ),
    )


def dictionary(typeable: Typeable[A]) -> Typeable[dict[str, A]]:
    """Derive a typeable for dictionaries of homogeneous values.

    Values are drawn as a list of key/value pairs and folded into a dict, so
    later pairs win on duplicate keys. Shrinking goes through the same pair
    list and is slightly nonlinear: it may shrink ``{"a": 123, "b": 456}`` to
    ``{"a": 456}`` by shrinking the key ``"b"`` to ``"a"``, clobbering the
    existing entry. That always reduces the number of keys, so it stays.
    """
    underlying = list_of(record(key=text(), value=typeable))

    def inject(pairs: list[dict[str, Any]]) -> dict[str, A]:
        out: dict[str, A] = {}
        for pair in pairs:
            out[pair["key"]] = pair["value"]
        return out

    def generate(size: int, rng: RandomSource) -> dict[str, A]:
        return inject(underlying.generator(size, rng))

    def shrink(value: dict[str, A]) -> Iterator[dict[str, A]]:
        representation = [{"key": k, "value": v} for k, v in value.items()]
        for shrunk in underlying.shrink(representation):
            yield inject(shrunk)

    return Typeable(
        generate,
        shrink,
        Schema(type=("object",), additionalProperties=typeable.schema),
    )
