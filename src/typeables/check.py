import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Generator, Generic, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode

from typeables.errors import PropertyFailedError
from typeables.options import GenerationOptions
from typeables.typeable import RandomSource, Typeable, default_random, seeded

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

A = TypeVar("A")

Predicate = Callable[[A], object]


@dataclass(frozen=True)
class CheckResult(Generic[A]):
    """Outcome of running a property against generated examples.

    ``counterexample`` is the smallest failing value found by shrinking,
    ``original`` the first failing value that was generated. Both are None
    when the property passed.
    """

    passed: bool
    examples_run: int
    counterexample: A | None = None
    original: A | None = None
    shrink_steps: int = 0
    error: Exception | None = None


def _run_predicate(
    predicate: Predicate[A], value: A
) -> tuple[bool, Exception | None]:
    """Return whether the predicate failed on value, and what it raised."""
    try:
        return predicate(value) is False, None
    except Exception as e:
        logger.debug("Predicate raised %s on %r", type(e).__name__, value)
        return True, e


def _shrink_failure(
    typeable: Typeable[A],
    predicate: Predicate[A],
    value: A,
    error: Exception | None,
    max_shrinks: int,
) -> tuple[A, Exception | None, int]:
    """Walk shrink candidates, adopting the first one that still fails."""
    steps = 0
    while steps < max_shrinks:
        for candidate in typeable.shrink(value):
            failed, candidate_error = _run_predicate(predicate, candidate)
            if failed:
                steps += 1
                logger.debug("Shrink step %d: %r", steps, candidate)
                value, error = candidate, candidate_error
                break
        else:
            break
    return value, error, steps


@dataclass
class _SpanHandle:
    """Wraps a span and tracks whether a status has been recorded yet."""

    span: Span
    did_set_status: bool = False

    def set_status(self, status: StatusCode, description: str | None = None) -> None:
        if self.did_set_status:
            return
        self.did_set_status = True
        self.span.set_status(status, description)


@contextmanager
def _trace_check(typeable: Typeable[Any]) -> Generator[_SpanHandle, None, None]:
    span = tracer.start_span("typeables.check")
    span.set_attribute("typeables.schema_type", list(typeable.schema.type))
    span_handle = _SpanHandle(span)
    try:
        yield span_handle
    except BaseException as e:
        span.record_exception(e, escaped=True)
        span_handle.set_status(StatusCode.ERROR, f"{type(e).__name__}: {e}")
        raise e
    finally:
        span_handle.set_status(StatusCode.OK)
        span.end()


def check(
    typeable: Typeable[A],
    predicate: Predicate[A],
    options: GenerationOptions | None = None,
    rng: RandomSource | None = None,
) -> CheckResult[A]:
    """Run ``predicate`` against generated values and shrink the first failure.

    The predicate fails by returning ``False`` or by raising an ``Exception``;
    any other return value passes. Example ``i`` is drawn at size
    ``min(i, options.max_size)``.
    """
    options = options or GenerationOptions()
    if rng is None:
        rng = seeded(options.seed) if options.seed is not None else default_random()

    with _trace_check(typeable) as span_handle:
        span = span_handle.span
        for i in range(options.max_examples):
            value = typeable.generate(min(i, options.max_size), rng)
            failed, error = _run_predicate(predicate, value)
            if not failed:
                continue
            counterexample, error, steps = _shrink_failure(
                typeable, predicate, value, error, options.max_shrinks
            )
            result = CheckResult(
                passed=False,
                examples_run=i + 1,
                counterexample=counterexample,
                original=value,
                shrink_steps=steps,
                error=error,
            )
            logger.info(
                "Property failed after %d examples, shrunk %d times to %r",
                result.examples_run,
                steps,
                counterexample,
            )
            span.set_attribute("typeables.examples_run", result.examples_run)
            span.set_attribute("typeables.shrink_steps", steps)
            if error is not None:
                span.record_exception(error)
            span_handle.set_status(
                StatusCode.ERROR, f"counterexample: {counterexample!r}"
            )
            return result

        span.set_attribute("typeables.examples_run", options.max_examples)
        return CheckResult(passed=True, examples_run=options.max_examples)


def assert_property(
    typeable: Typeable[A],
    predicate: Predicate[A],
    options: GenerationOptions | None = None,
    rng: RandomSource | None = None,
) -> CheckResult[A]:
    """Like check, but raises PropertyFailedError when the property fails."""
    result = check(typeable, predicate, options, rng)
    if not result.passed:
        raise PropertyFailedError(result)
    return result


def for_all(
    typeable: Typeable[A], options: GenerationOptions | None = None
) -> Callable[[Callable[[A], Any]], Callable[[], None]]:
    """Decorate a test function taking one generated argument.

    The wrapped function takes no arguments, so pytest collects it as a plain
    test::

        @for_all(number(integer=True))
        def test_abs(x):
            assert abs(x) >= 0
    """

    def decorator(fn: Callable[[A], Any]) -> Callable[[], None]:
        def wrapper() -> None:
            assert_property(typeable, fn, options)

        wrapper.__name__ = fn.__name__
        wrapper.__qualname__ = fn.__qualname__
        wrapper.__module__ = fn.__module__
        wrapper.__doc__ = fn.__doc__
        return wrapper

    return decorator
