import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from typeables.check import CheckResult


class Violation(BaseModel):
    """A single schema violation reported by the validator."""

    location: str
    instance: Any
    message: str

    def format(self) -> str:
        rendered = json.dumps(self.instance, default=str)
        return f"{self.location} ({rendered}) {self.message}"


class TypeableError(Exception):
    """Base class for every error raised by typeables."""


class InvalidTypeableError(TypeableError, ValueError):
    """Raised when a typeable is built from an invalid configuration."""


class CodePointDecodeError(TypeableError, ValueError):
    """Raised when a string is not exactly one Unicode code point."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"decode_code_point({value!r}): {reason}")


class TypeableValidationError(TypeableError, TypeError):
    """Raised when a value does not validate against a typeable's schema."""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        errs = [v.format() for v in violations]
        if len(errs) > 1:
            msg = "Errors validating input against typeable:\n- " + "\n- ".join(errs)
        else:
            msg = "Error validating input against typeable: " + errs[0]
        super().__init__(msg)


class PropertyFailedError(TypeableError, AssertionError):
    """Raised by assert_property when a counterexample is found."""

    def __init__(self, result: "CheckResult") -> None:
        self.result = result
        msg = (
            f"Property failed after {result.examples_run} examples "
            f"({result.shrink_steps} shrinks): "
            f"counterexample {result.counterexample!r}"
        )
        if result.error is not None:
            msg += f", raised {type(result.error).__name__}: {result.error}"
        super().__init__(msg)
