from .check import CheckResult, assert_property, check, for_all
from .combinators import dictionary, list_of, nullable, record
from .errors import (
    CodePointDecodeError,
    InvalidTypeableError,
    PropertyFailedError,
    TypeableError,
    TypeableValidationError,
    Violation,
)
from .options import GenerationOptions
from .primitives import boolean, number, text
from .schema import Schema
from .typeable import RandomSource, Typeable, seeded
from .validate import is_valid, validate

__all__ = [
    "Typeable",
    "Schema",
    "RandomSource",
    "seeded",
    "boolean",
    "number",
    "text",
    "nullable",
    "list_of",
    "record",
    "dictionary",
    "validate",
    "is_valid",
    "check",
    "assert_property",
    "for_all",
    "CheckResult",
    "GenerationOptions",
    "TypeableError",
    "InvalidTypeableError",
    "CodePointDecodeError",
    "TypeableValidationError",
    "PropertyFailedError",
    "Violation",
]
