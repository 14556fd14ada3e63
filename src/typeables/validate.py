import json
from typing import Any, Iterable, TypeVar

import jsonschema

from typeables.errors import TypeableValidationError, Violation
from typeables.typeable import Typeable

A = TypeVar("A")


def format_location(path: Iterable[str | int]) -> str:
    """Render a path into an instance the way validator messages name it.

    >>> format_location(["a", 0, "weird key"])
    'instance.a[0]["weird key"]'
    """
    location = "instance"
    for segment in path:
        if isinstance(segment, int):
            location += f"[{segment}]"
        elif segment.isidentifier():
            location += f".{segment}"
        else:
            location += f"[{json.dumps(segment)}]"
    return location


def violations(typeable: Typeable[Any], instance: Any) -> list[Violation]:
    validator = jsonschema.Draft7Validator(typeable.json_schema())
    return [
        Violation(
            location=format_location(error.absolute_path),
            instance=error.instance,
            message=error.message,
        )
        for error in validator.iter_errors(instance)
    ]


def is_valid(typeable: Typeable[Any], instance: Any) -> bool:
    return jsonschema.Draft7Validator(typeable.json_schema()).is_valid(instance)


def validate(typeable: Typeable[A], instance: Any) -> A:
    """Check ``instance`` against the typeable's schema and return it.

    Raises:
        TypeableValidationError: listing every violation found.
    """
    found = violations(typeable, instance)
    if found:
        raise TypeableValidationError(found)
    return instance
